"""文档节点接口."""

from abc import ABC, abstractmethod
from typing import Mapping


class DocumentNode(ABC):
    """文档树节点接口.

    核心逻辑只依赖该接口，宿主文档树通过适配器实现它（见 ``xml_tree.XmlNode``）。
    节点由宿主持有，本系统只读取节点，并且最多改写一个节点的文本。
    """

    @abstractmethod
    def get_type(self) -> str:
        """返回节点类型标记."""

    @abstractmethod
    def get_value(self) -> str:
        """返回节点文本（仅对含文本的节点有意义）."""

    @abstractmethod
    def set_value(self, value: str) -> None:
        """写回节点文本."""

    @abstractmethod
    def get_children(self) -> Mapping[str, "DocumentNode"]:
        """返回子节点映射 {名称: 节点}."""

    def get_name(self) -> str:
        """返回节点名称，用于日志和状态消息."""
        return self.__class__.__name__
