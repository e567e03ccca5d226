"""CSV表格导入应用."""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import typer
from loguru import logger

from csvtable.data.document_io import DocumentIO
from csvtable.data.errors import CsvTableImportError, FileOpenError, NoPlaceholderFoundError
from csvtable.data.models import MatchHandle
from csvtable.data.node import DocumentNode
from csvtable.data.placeholder import PlaceholderPattern
from csvtable.data.scanner import DocumentTreeScanner
from csvtable.data.substitution import PlaceholderSubstitutionEngine
from csvtable.service.renderer import TableRenderer

# 文件选择对话框确认时的结果代码
RESULT_OK = "ok"


@dataclass
class ImportResult:
    """处理结果."""

    success: bool
    message: str
    count: int = 0
    rows: int = 0
    cancelled: bool = False

    @property
    def report(self) -> str:
        """生成结果报告.

        Returns:
            结果报告字符串
        """
        if self.cancelled:
            return self.message
        if not self.success:
            return f"处理失败: {self.message}"
        if self.rows:
            return f"{self.message}\n- 导入了 {self.rows} 行数据"
        return self.message


def _log_message(message: str) -> None:
    logger.info(message)


class CsvImportProcessor:
    """CSV表格导入处理器.

    响应宿主事件：初始化和打开视图时扫描文档树，收到CSV文本或选中CSV文件时
    把表格写入当前占位符。每个处理器持有自己的匹配句柄，新的扫描总是覆盖旧句柄。
    所有错误都在这里转换为状态消息，不会抛给宿主。
    """

    def __init__(
        self,
        notify: Optional[Callable[[str], None]] = None,
        delimiter: Optional[str] = None,
        pattern: Optional[PlaceholderPattern] = None,
    ) -> None:
        """初始化处理器.

        Args:
            notify: 状态消息回调，默认写入日志
            delimiter: CSV字段分隔符
            pattern: 占位符匹配规则
        """
        self.notify = notify or _log_message
        self.pattern = pattern or PlaceholderPattern()
        self.scanner = DocumentTreeScanner(self.pattern)
        self.engine = PlaceholderSubstitutionEngine(self.pattern)
        self.renderer = TableRenderer(delimiter)
        self.document_io = DocumentIO()
        self.handle = MatchHandle.empty()
        logger.debug("CSV导入处理器已初始化")

    def _finish(self, result: ImportResult) -> ImportResult:
        self.notify(result.report)
        return result

    def _fail(self, error: CsvTableImportError) -> ImportResult:
        logger.error(f"{error.__class__.__name__}: {error}")
        return self._finish(ImportResult(success=False, message=str(error)))

    def scan(self, root: Optional[DocumentNode]) -> ImportResult:
        """扫描文档树并更新当前匹配句柄.

        Args:
            root: 文档树根节点

        Returns:
            处理结果
        """
        try:
            self.handle = self.scanner.scan(root)
            if not self.handle.found:
                raise NoPlaceholderFoundError(f"文档中没有找到 {self.pattern.token} 占位符")
        except CsvTableImportError as e:
            return self._fail(e)

        return self._finish(ImportResult(
            success=True,
            message=f"找到 {self.pattern.token} 占位符: {self.handle.path}",
        ))

    def on_initialize(self, root: Optional[DocumentNode]) -> ImportResult:
        """宿主初始化时扫描整个文档树."""
        logger.info(f"正在扫描文档中的 {self.pattern.token} 占位符...")
        return self.scan(root)

    def on_view_opened(self, root: Optional[DocumentNode], view_name: str = "") -> ImportResult:
        """每次打开视图时重新扫描."""
        logger.info(f"已打开视图 {view_name}，重新扫描文档...")
        return self.scan(root)

    def on_csv_text(self, csv_text: Optional[str]) -> ImportResult:
        """把CSV文本渲染为表格并替换当前占位符.

        Args:
            csv_text: CSV文本

        Returns:
            处理结果
        """
        try:
            self.engine.check(self.handle)
            table = self.renderer.decode(csv_text)
            markup = self.renderer.build(table)
            result = self.engine.apply(self.handle, markup)
        except CsvTableImportError as e:
            return self._fail(e)

        return self._finish(ImportResult(
            success=True,
            message="CSV导入成功!",
            count=result.count,
            rows=len(table),
        ))

    def on_file_selected(self, result: str, path: Optional[str]) -> ImportResult:
        """处理文件选择对话框的结果.

        取消选择时直接返回，不会触碰解析器、替换引擎或匹配句柄。

        Args:
            result: 对话框结果代码，"ok" 表示确认
            path: 选中的文件路径

        Returns:
            处理结果
        """
        if result != RESULT_OK:
            logger.debug(f"文件选择已取消: {result}")
            return ImportResult(success=False, message="已取消选择文件", cancelled=True)

        try:
            contents = self.document_io.open_text_file(path) if path else None
            if contents is None:
                raise FileOpenError(f"无法打开选中的CSV文件: {path}")
        except CsvTableImportError as e:
            return self._fail(e)

        return self.on_csv_text(contents)


# 命令行接口
app = typer.Typer()


def _echo_result(result: ImportResult) -> None:
    color = typer.colors.GREEN if result.success else typer.colors.RED
    typer.echo(typer.style(result.report, fg=color))


@app.command()
def scan(
    document_path: str = typer.Argument(..., help="XML文档路径"),
) -> None:
    """扫描XML文档，报告 #table# 占位符所在的位置."""
    try:
        doc = DocumentIO.load_document(document_path)
    except (FileNotFoundError, ValueError) as e:
        typer.echo(typer.style(f"处理失败: {e}", fg=typer.colors.RED))
        raise typer.Exit(code=1)

    processor = CsvImportProcessor()
    result = processor.scan(doc.root)
    _echo_result(result)
    if not result.success:
        raise typer.Exit(code=1)


@app.command("import")
def import_csv(
    document_path: str = typer.Argument(..., help="XML文档路径"),
    csv_path: str = typer.Argument(..., help="CSV文件路径"),
    output_path: str = typer.Option(
        None, "--output", "--output-path", "-o", help="输出文档路径，默认为'input_imported.xml'"
    ),
    delimiter: str = typer.Option(None, help="CSV字段分隔符，默认为逗号"),
) -> None:
    """用CSV文件生成表格，替换XML文档中的第一个 #table# 占位符."""
    # 如果未指定输出路径，则使用默认路径
    if not output_path:
        input_file = Path(document_path)
        output_path = str(input_file.parent / f"{input_file.stem}_imported{input_file.suffix}")

    try:
        doc = DocumentIO.load_document(document_path)
        processor = CsvImportProcessor(delimiter=delimiter)
    except (FileNotFoundError, ValueError) as e:
        typer.echo(typer.style(f"处理失败: {e}", fg=typer.colors.RED))
        raise typer.Exit(code=1)

    result = processor.scan(doc.root)
    if result.success:
        result = processor.on_file_selected(RESULT_OK, csv_path)
    if not result.success:
        _echo_result(result)
        raise typer.Exit(code=1)

    try:
        DocumentIO.save_document(doc, output_path)
    except ValueError as e:
        typer.echo(typer.style(f"处理失败: {e}", fg=typer.colors.RED))
        raise typer.Exit(code=1)

    _echo_result(result)
    typer.echo(f"- 输出文件: {output_path}")


@app.command()
def render(
    csv_path: str = typer.Argument(..., help="CSV文件路径"),
    delimiter: str = typer.Option(None, help="CSV字段分隔符，默认为逗号"),
) -> None:
    """把CSV文件渲染为表格标记并输出."""
    try:
        renderer = TableRenderer(delimiter)
        contents = DocumentIO.open_text_file(csv_path)
        if contents is None:
            raise FileOpenError(f"无法打开CSV文件: {csv_path}")
        markup = renderer.render(contents)
    except (CsvTableImportError, ValueError) as e:
        typer.echo(typer.style(f"处理失败: {e}", fg=typer.colors.RED))
        raise typer.Exit(code=1)

    typer.echo(markup)


if __name__ == "__main__":
    app()
