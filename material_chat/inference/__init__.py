"""Inference backends, retry policy and failure taxonomy.

Responsibilities:
    - Speaking the hosted, local and streaming backend protocols
    - Retrying while a backend is still loading its model
    - Turning every failure into a displayable assistant turn

Nothing in here raises past ``InferenceClient``.
"""

from material_chat.inference.client import InferenceClient
from material_chat.inference.config import InferenceConfig, get_inference_config

__all__ = ["InferenceClient", "InferenceConfig", "get_inference_config"]
