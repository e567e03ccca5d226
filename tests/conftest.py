"""测试公共夹具."""

from typing import Dict, Optional

import pytest

from csvtable.data.node import DocumentNode


class MemoryNode(DocumentNode):
    """内存中的文档节点，记录读写次数."""

    def __init__(
        self,
        name: str,
        node_type: str = "node",
        value: str = "",
        children: Optional[Dict[str, "MemoryNode"]] = None,
    ) -> None:
        self.name = name
        self.node_type = node_type
        self.value = value
        self.children = children or {}
        self.get_value_calls = 0
        self.set_value_calls = 0

    def get_type(self) -> str:
        return self.node_type

    def get_value(self) -> str:
        self.get_value_calls += 1
        return self.value

    def set_value(self, value: str) -> None:
        self.set_value_calls += 1
        self.value = value

    def get_children(self) -> Dict[str, "MemoryNode"]:
        return self.children

    def get_name(self) -> str:
        return self.name


def text_node(name: str, value: str) -> MemoryNode:
    """创建富文本节点."""
    return MemoryNode(name, "formattedtext", value)


def branch(name: str, /, **children: MemoryNode) -> MemoryNode:
    """创建带子节点的普通节点."""
    return MemoryNode(name, "node", "", dict(children))


@pytest.fixture
def placeholder_tree():
    """模拟带占位符的文档树."""
    target = text_node("text", "<h1>Loot</h1><p>#table#</p><p>end</p>")
    root = branch(
        "root",
        notes=branch(
            "notes",
            **{
                "id-00001": branch("id-00001", name=MemoryNode("name", "string", "#table#"), text=target),
            }
        ),
    )
    return root, target
