"""记忆模块：单次运行内的 Action Log"""

from typing import Iterator, List

from .models import ActionRecord


class ActionLog:
    """
    只追加的动作日志。

    每次工具尝试执行（无论成功或失败）追加一条记录，按调用顺序排列。
    每次运行拥有自己的实例，记录一旦写入不再修改。
    """

    def __init__(self):
        self._records: List[ActionRecord] = []

    def record(self, description: str) -> ActionRecord:
        """追加一条记录"""
        rec = ActionRecord(step_num=len(self._records) + 1, description=description)
        self._records.append(rec)
        return rec

    def steps(self) -> List[str]:
        """按顺序返回所有步骤描述（副本）"""
        return [rec.description for rec in self._records]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ActionRecord]:
        return iter(tuple(self._records))

