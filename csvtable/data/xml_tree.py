"""XML文档树适配器.

把 ``db.xml`` 风格的XML数据库适配为 ``DocumentNode`` 接口::

    <root>
      <notes>
        <id-00001>
          <name type="string">Loot</name>
          <text type="formattedtext"><p>#table#</p></text>
        </id-00001>
      </notes>
    </root>

节点类型取自 ``type`` 属性，富文本节点的值是其内部标记。
"""

from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, Optional, Union
from xml.sax.saxutils import escape

from loguru import logger
from lxml import etree

from csvtable.config.settings import settings
from csvtable.data.errors import ReplacementFailedError
from csvtable.data.node import DocumentNode


class XmlNode(DocumentNode):
    """XML元素节点."""

    def __init__(self, document: "XmlDocument", element: etree._Element) -> None:
        self.document = document
        self.element = element

    def get_type(self) -> str:
        return self.element.get("type", "")

    def get_name(self) -> str:
        return self.element.tag

    def is_formatted(self) -> bool:
        return self.get_type() == self.document.formatted_type

    def get_value(self) -> str:
        if self.is_formatted():
            return inner_markup(self.element)
        return self.element.text or ""

    def set_value(self, value: str) -> None:
        if self.is_formatted():
            removed = list(self.element)
            set_inner_markup(self.element, value)
            self.document.forget(removed)
        else:
            self.element.text = value

    def get_children(self) -> Dict[str, "XmlNode"]:
        elements = [child for child in self.element if isinstance(child.tag, str)]
        counts = Counter(child.tag for child in elements)
        seen: Counter = Counter()
        children: Dict[str, XmlNode] = {}
        for child in elements:
            name = child.tag
            if counts[name] > 1:
                # 同名兄弟节点按文档顺序编号
                seen[name] += 1
                name = f"{name}[{seen[name]}]"
            children[name] = self.document.node_for(child)
        return children

    def __repr__(self) -> str:
        return f"XmlNode(name='{self.get_name()}', type='{self.get_type()}')"


def inner_markup(element: etree._Element) -> str:
    """返回元素的内部标记（不含元素自身的标签）."""
    parts = [escape(element.text)] if element.text else []
    for child in element:
        # tostring 默认带上子元素的 tail 文本
        parts.append(etree.tostring(child, encoding="unicode"))
    return "".join(parts)


def set_inner_markup(element: etree._Element, markup: str) -> None:
    """用标记替换元素的全部内容.

    先完整解析标记，解析失败时元素保持不变。

    Raises:
        ReplacementFailedError: 标记不是格式良好的XML片段
    """
    try:
        wrapper = etree.fromstring(f"<wrapper>{markup}</wrapper>")
    except etree.XMLSyntaxError as e:
        raise ReplacementFailedError(f"写回的标记格式错误: {e}")

    for child in list(element):
        element.remove(child)
    element.text = wrapper.text
    for child in list(wrapper):
        element.append(child)


class XmlDocument:
    """XML文档，持有元素与节点适配器的对应关系.

    匹配句柄只弱引用节点，所以同一个元素必须始终返回同一个适配器对象，
    并且适配器的生命周期跟随文档。富文本写回时被移除的元素，其适配器随之丢弃。
    """

    def __init__(self, tree: etree._ElementTree, formatted_type: Optional[str] = None) -> None:
        self.tree = tree
        self.formatted_type = formatted_type or settings.placeholder.container_type
        self._nodes: Dict[etree._Element, XmlNode] = {}

    @classmethod
    def from_string(cls, text: Union[str, bytes], formatted_type: Optional[str] = None) -> "XmlDocument":
        """从字符串创建XML文档."""
        if isinstance(text, str):
            text = text.encode("utf-8")
        root = etree.fromstring(text)
        return cls(root.getroottree(), formatted_type)

    @classmethod
    def load(cls, path: Union[str, Path], formatted_type: Optional[str] = None) -> "XmlDocument":
        """从文件加载XML文档."""
        tree = etree.parse(str(path))
        logger.debug(f"已解析XML文档: {path}")
        return cls(tree, formatted_type)

    @property
    def root(self) -> XmlNode:
        return self.node_for(self.tree.getroot())

    def node_for(self, element: etree._Element) -> XmlNode:
        """返回元素对应的节点适配器."""
        node = self._nodes.get(element)
        if node is None:
            node = XmlNode(self, element)
            self._nodes[element] = node
        return node

    def forget(self, elements: Iterable[etree._Element]) -> None:
        """丢弃已从文档中移除的元素（含其子树）对应的节点适配器."""
        for element in elements:
            for sub in element.iter():
                self._nodes.pop(sub, None)

    def to_string(self) -> str:
        return etree.tostring(self.tree, encoding="unicode")

    def save(self, path: Union[str, Path]) -> None:
        """保存XML文档."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.tree.write(str(path), encoding="utf-8", xml_declaration=True)
        logger.info(f"已保存XML文档: {path}")
