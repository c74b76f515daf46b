"""Services module - Business logic layer"""

from .config_manager import ConfigManager
from .diff_generator import DiffGenerator, diff_lines
from .history_store import HistoryStore
from .llm_service import LLMService, call_llm
from .optimizer import CodeOptimizer

__all__ = [
    "ConfigManager",
    "DiffGenerator",
    "diff_lines",
    "HistoryStore",
    "LLMService",
    "call_llm",
    "CodeOptimizer",
]
