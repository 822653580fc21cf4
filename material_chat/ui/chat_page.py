"""NiceGUI chat interface with session sidebar and live streaming."""

from nicegui import ui

from material_chat.inference.client import InferenceClient
from material_chat.models.schemas import ChatTurn, Sender
from material_chat.session.store import EmptyInputError, SessionBusyError, SessionStore

CUSTOM_CSS = """
<style>
    body { background: #f5f5f5; min-height: 100vh; }

    .sidebar { background: #1f2937; color: white; }
    .session-btn { justify-content: flex-start; text-transform: none; }
    .session-active { background: rgba(255, 255, 255, 0.15) !important; }

    .message-user { background: #4f46e5; color: white; border-radius: 18px 18px 4px 18px; }
    .message-assistant { background: #f3f4f6; color: #1f2937; border-radius: 18px 18px 18px 4px; }

    .input-box {
        background: #f9fafb;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
    }
    .input-box:focus-within { border-color: #4f46e5; }
</style>
"""


@ui.page("/")
def chat_page() -> None:
    """Main chat page. Each browser tab gets its own session store."""
    ui.add_head_html(CUSTOM_CSS)
    store = SessionStore(InferenceClient())

    def render_turn(turn: ChatTurn) -> None:
        is_user = turn.sender == Sender.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"
        icon = "person" if is_user else "smart_toy"

        with ui.row().classes(f"w-full {align} gap-3 items-end"):
            if not is_user:
                ui.icon(icon).classes("text-2xl text-gray-500")
            with ui.element("div").classes(f"max-w-[70%] px-4 py-3 {bubble}"):
                ui.label(turn.message).classes("text-sm whitespace-pre-wrap")
            if is_user:
                ui.icon(icon).classes("text-2xl text-indigo-600")

    @ui.refreshable
    def sidebar() -> None:
        for session in store.sessions:
            active = "session-active" if session.id == store.active_id else ""
            ui.button(
                session.title,
                icon="chat_bubble_outline",
                on_click=lambda sid=session.id: store.select_session(sid),
            ).props("flat color=white align=left").classes(f"w-full session-btn {active}")

    @ui.refreshable
    def messages() -> None:
        session = store.active_session
        if not session.turns:
            with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                ui.icon("forum").classes("text-5xl text-gray-300")
                ui.label("Start a conversation").classes("text-lg text-gray-400")
            return
        for turn in session.turns:
            render_turn(turn)
        if store.partial_response:
            render_turn(ChatTurn.assistant(store.partial_response))
        elif session.pending:
            with ui.row().classes("w-full justify-start gap-3 items-center"):
                ui.spinner("dots", size="lg").classes("text-indigo-600")

    def refresh() -> None:
        sidebar.refresh()
        messages.refresh()

    store.subscribe(refresh)

    async def send_message() -> None:
        try:
            await store.submit_query(store.pending_input)
        except EmptyInputError as e:
            ui.notify(str(e), type="warning")
        except SessionBusyError as e:
            ui.notify(str(e), type="info")

    # === UI Layout ===
    with ui.row().classes("w-full h-screen no-wrap gap-0"):
        # Sidebar
        with ui.column().classes("sidebar w-64 h-full p-4 gap-3"):
            with ui.row().classes("items-center gap-2"):
                ui.icon("view_in_ar").classes("text-3xl")
                ui.label("materiAl").classes("text-xl font-semibold")
            ui.button("Chat", icon="add", on_click=store.create_session).props(
                "outline color=white"
            ).classes("w-full")
            with ui.scroll_area().classes("flex-grow w-full"):
                sidebar()

        # Main
        with ui.column().classes("flex-grow h-full gap-0"):
            with (
                ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
                ui.column().classes("w-full max-w-3xl mx-auto p-5 gap-4"),
            ):
                messages()

            with ui.column().classes("w-full max-w-3xl mx-auto p-4 gap-1 items-center"):
                with ui.row().classes("w-full gap-3 items-end"):
                    with ui.element("div").classes("flex-grow input-box px-3 py-2"):
                        (
                            ui.textarea(placeholder="Type here ......")
                            .props("autogrow borderless dense rows=1")
                            .classes("w-full")
                            .bind_value(store, "pending_input")
                            .on("keydown.enter.exact.prevent", send_message)
                        )
                    ui.button(icon="send", on_click=send_message).props("round unelevated")
                ui.label("This may produce incorrect results").classes(
                    "text-xs text-gray-400"
                )

