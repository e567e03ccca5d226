"""表格标记生成器."""

from typing import Optional

from csvtable.data.models import ParsedTable
from csvtable.data.sanitizer import TextSanitizer


class MarkupTableBuilder:
    """把解析后的表格渲染为 ``<table><tr><td>..</td></tr></table>`` 标记.

    不区分表头行，不加样式属性，每个单元格都经过文本清洗器处理。
    """

    def __init__(self, sanitizer: Optional[TextSanitizer] = None) -> None:
        self.sanitizer = sanitizer or TextSanitizer()

    def build(self, table: ParsedTable) -> str:
        """生成表格标记.

        Args:
            table: 行列表

        Returns:
            表格标记字符串
        """
        parts = ["<table>"]
        for row in table:
            parts.append("<tr>")
            for cell in row:
                parts.append(f"<td>{self.sanitizer.sanitize(cell)}</td>")
            parts.append("</tr>")
        parts.append("</table>")
        return "".join(parts)
