"""
状態スナップショット管理

サウンドコントローラの get_state() をスナップショットとして名前付きで保持し、
1スナップショット1ファイルのJSONとして保存・読込します。
"""

import copy
import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from ..core.types import GBAudioError
from ..core.sound_controller import SoundController

SNAPSHOT_FORMAT = "pygbaudio-snapshot"
SNAPSHOT_VERSION = 1


class StateManagerError(GBAudioError):
    """スナップショット操作のエラー"""
    pass


@dataclass
class StateSnapshot:
    """ある時点のコントローラ状態

    Attributes:
        name: スナップショット名
        state: SoundController.get_state() の結果
        description: 任意の説明
        master_clock_counter: 取得時点の累積マスタークロック
        created_at: 作成日時（ISO 8601）
    """
    name: str
    state: Dict[str, Any]
    description: str = ""
    master_clock_counter: int = 0
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'format': SNAPSHOT_FORMAT,
            'version': SNAPSHOT_VERSION,
            'name': self.name,
            'description': self.description,
            'master_clock_counter': self.master_clock_counter,
            'created_at': self.created_at,
            'state': self.state
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StateSnapshot':
        """to_dict() の出力から復元

        Raises:
            StateManagerError: 形式やバージョンが一致しない場合
        """
        if data.get('format') != SNAPSHOT_FORMAT:
            raise StateManagerError(f"Not a snapshot document (format={data.get('format')!r})")
        if data.get('version') != SNAPSHOT_VERSION:
            raise StateManagerError(f"Unsupported snapshot version {data.get('version')!r}")

        try:
            return cls(
                name=data['name'],
                state=data['state'],
                description=data.get('description', ""),
                master_clock_counter=data.get('master_clock_counter', 0),
                created_at=data.get('created_at', "")
            )
        except KeyError as e:
            raise StateManagerError(f"Snapshot document is missing {e}") from e


class StateManager:
    """名前付きスナップショットの保持とJSON入出力

    スナップショットはメモリ上に保持し、save_snapshot_to_file() で
    base_directory 配下へ書き出します。
    """

    def __init__(self, base_directory: Union[str, Path] = "states"):
        self.base_directory = Path(base_directory)
        self.base_directory.mkdir(parents=True, exist_ok=True)

        self._snapshots: Dict[str, StateSnapshot] = {}
        self._last_used: Optional[str] = None
        self._counts = {
            'created': 0,
            'restored': 0,
            'saved': 0,
            'loaded': 0
        }

    def _get(self, name: str) -> StateSnapshot:
        try:
            return self._snapshots[name]
        except KeyError:
            raise StateManagerError(f"No snapshot named '{name}'") from None

    def create_snapshot(self, controller: SoundController, name: str,
                        description: str = "") -> StateSnapshot:
        """コントローラの現在状態を name で記録（同名は上書き）"""
        snapshot = StateSnapshot(
            name=name,
            state=copy.deepcopy(controller.get_state()),
            description=description,
            master_clock_counter=controller.master_clock_counter
        )
        self._snapshots[name] = snapshot
        self._last_used = name
        self._counts['created'] += 1
        return snapshot

    def restore_snapshot(self, controller: SoundController, name: str) -> None:
        """スナップショットの状態をコントローラに書き戻す

        Raises:
            StateManagerError: 名前が無い場合、または状態がコントローラに合わない場合
        """
        snapshot = self._get(name)
        try:
            controller.set_state(copy.deepcopy(snapshot.state))
        except GBAudioError as e:
            raise StateManagerError(f"Cannot restore '{name}': {e}") from e

        self._last_used = name
        self._counts['restored'] += 1

    def save_snapshot_to_file(self, name: str, filename: str = None) -> str:
        """スナップショットをJSONファイルに保存

        Args:
            name: 保存するスナップショット名
            filename: base_directory からの相対ファイル名（Noneで名前と日時から生成）

        Returns:
            書き出したファイルのパス
        """
        snapshot = self._get(name)
        if filename is None:
            filename = f"{name}_{datetime.now():%Y%m%d_%H%M%S}.json"

        path = self.base_directory / filename
        try:
            path.write_text(json.dumps(snapshot.to_dict(), indent=2), encoding='utf-8')
        except OSError as e:
            raise StateManagerError(f"Cannot write {path}: {e}") from e

        self._counts['saved'] += 1
        return str(path)

    def load_snapshot_from_file(self, path: Union[str, Path]) -> str:
        """JSONファイルからスナップショットを読み込んで登録

        Returns:
            登録したスナップショット名
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except FileNotFoundError:
            raise StateManagerError(f"Snapshot file not found: {path}") from None
        except (OSError, ValueError) as e:
            raise StateManagerError(f"Cannot read snapshot from {path}: {e}") from e

        if not isinstance(data, dict):
            raise StateManagerError(f"Not a snapshot document: {path}")

        snapshot = StateSnapshot.from_dict(data)
        self._snapshots[snapshot.name] = snapshot
        self._counts['loaded'] += 1
        return snapshot.name

    def list_snapshots(self) -> List[Dict[str, Any]]:
        """登録済みスナップショットの概要（新しい順）"""
        entries = [
            {
                'name': snapshot.name,
                'description': snapshot.description,
                'created_at': snapshot.created_at,
                'master_clock_counter': snapshot.master_clock_counter,
                'is_current': snapshot.name == self._last_used
            }
            for snapshot in self._snapshots.values()
        ]
        entries.sort(key=lambda entry: entry['created_at'], reverse=True)
        return entries

    def delete_snapshot(self, name: str) -> None:
        self._get(name)
        del self._snapshots[name]
        if self._last_used == name:
            self._last_used = None

    def get_statistics(self) -> Dict[str, Any]:
        return {
            'snapshots_count': len(self._snapshots),
            'current_snapshot': self._last_used,
            'base_directory': str(self.base_directory),
            'stats': dict(self._counts)
        }


def create_state_manager(base_directory: Union[str, Path] = "states") -> StateManager:
    """StateManagerを作成"""
    return StateManager(base_directory)
