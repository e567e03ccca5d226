"""数据模型定义."""

import weakref
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from csvtable.data.node import DocumentNode

# 解析后的表格：行的有序列表，每行是单元格字符串的有序列表
ParsedTable = List[List[str]]


class HandleState(Enum):
    """匹配句柄状态."""

    IDLE = "idle"  # 没有匹配
    MATCHED = "matched"  # 已找到占位符，可以替换
    CONSUMED = "consumed"  # 已替换过，需要重新扫描


class MatchHandle:
    """占位符匹配句柄.

    弱引用最多一个文档节点（当前的占位符持有者）。节点由宿主文档树持有，
    句柄不会延长节点的生命周期；节点被回收后句柄视为没有匹配。
    """

    def __init__(self, node: Optional[DocumentNode] = None, path: str = "") -> None:
        """初始化匹配句柄.

        Args:
            node: 找到占位符的节点，None表示没有匹配
            path: 节点在树中的路径，用于日志
        """
        self._ref = weakref.ref(node) if node is not None else None
        self.path = path
        self.state = HandleState.MATCHED if node is not None else HandleState.IDLE

    @classmethod
    def empty(cls) -> "MatchHandle":
        """创建空句柄."""
        return cls()

    @property
    def node(self) -> Optional[DocumentNode]:
        """返回引用的节点，节点已被回收时返回None."""
        if self._ref is None:
            return None
        return self._ref()

    @property
    def found(self) -> bool:
        """句柄是否持有可替换的匹配."""
        return self.state is HandleState.MATCHED and self.node is not None

    def consume(self) -> None:
        """标记句柄已被成功替换使用."""
        self.state = HandleState.CONSUMED

    def __repr__(self) -> str:
        return f"MatchHandle(state='{self.state.value}', path='{self.path}')"


@dataclass
class ReplacementResult:
    """占位符替换结果."""

    count: int
    node_name: str = ""

    @property
    def success(self) -> bool:
        return self.count == 1
