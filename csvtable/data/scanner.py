"""文档树扫描器."""

import re
from typing import List, Optional, Tuple, Union

from loguru import logger

from csvtable.config.settings import settings
from csvtable.data.errors import MissingRootError
from csvtable.data.models import MatchHandle
from csvtable.data.node import DocumentNode
from csvtable.data.placeholder import PlaceholderPattern

# 名称中的数字段
DIGITS = re.compile(r"(\d+)")


def natural_key(name: str) -> Tuple[Union[str, int], ...]:
    """自然排序键，数字段按数值比较，"item[2]" 排在 "item[10]" 之前."""
    # re.split 的结果中字符串段和数字段交替出现，同一位置的类型总是相同
    return tuple(int(part) if i % 2 else part for i, part in enumerate(DIGITS.split(name)))


class DocumentTreeScanner:
    """文档树扫描器.

    深度优先遍历文档树，返回第一个含有占位符的富文本节点。
    找到后立即停止遍历，不会收集全部匹配。
    """

    def __init__(
        self,
        pattern: Optional[PlaceholderPattern] = None,
        container_type: Optional[str] = None,
        sort_children: Optional[bool] = None,
    ) -> None:
        """初始化扫描器.

        Args:
            pattern: 占位符匹配规则
            container_type: 富文本节点类型，默认读取配置（formattedtext）
            sort_children: 是否按名称自然排序子节点；宿主的子节点映射无序时需要开启，
                这样"第一个匹配"才是确定的
        """
        self.pattern = pattern or PlaceholderPattern()
        self.container_type = container_type if container_type is not None else settings.placeholder.container_type
        self.sort_children = settings.placeholder.sort_children if sort_children is None else sort_children

    def scan(self, root: Optional[DocumentNode]) -> MatchHandle:
        """扫描文档树.

        Args:
            root: 根节点

        Returns:
            匹配句柄，没有找到时为空句柄

        Raises:
            MissingRootError: 根节点不可用
        """
        if root is None:
            raise MissingRootError("无法访问文档树根节点")

        # 用显式栈代替递归，避免很深的树超过递归深度
        stack: List[Tuple[DocumentNode, str]] = [(root, root.get_name())]
        visited = 0
        while stack:
            node, path = stack.pop()
            visited += 1

            if node.get_type() == self.container_type and self.pattern.contains(node.get_value()):
                logger.info(f"找到占位符 {self.pattern.token}: {path}")
                return MatchHandle(node, path)

            children = node.get_children()
            names = sorted(children, key=natural_key) if self.sort_children else list(children)
            # 逆序入栈，保证按名称顺序出栈
            for name in reversed(names):
                stack.append((children[name], f"{path}/{name}"))

        logger.debug(f"已扫描 {visited} 个节点，没有找到占位符")
        return MatchHandle.empty()
