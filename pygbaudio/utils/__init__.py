"""
PyGBAudio ユーティリティ層

このモジュールは、APUエミュレータで使用されるユーティリティクラスと関数を提供します。
"""

from .state_manager import (
    StateManager,
    StateManagerError,
    StateSnapshot,
    create_state_manager,
)

# パブリックAPI
__all__ = [
    "StateManager",
    "StateManagerError",
    "StateSnapshot",
    "create_state_manager",
]
