"""异常定义.

所有异常都可恢复：核心组件负责抛出，处理器在事件边界统一捕获并转换为状态消息。
"""


class CsvTableImportError(Exception):
    """CSV表格导入异常基类."""


class MissingRootError(CsvTableImportError):
    """无法访问文档树根节点."""


class NoPlaceholderFoundError(CsvTableImportError):
    """扫描完成，但没有找到占位符."""


class FileOpenError(CsvTableImportError):
    """无法打开或读取CSV文件."""


class CsvDecodeError(CsvTableImportError):
    """CSV内容为空或格式错误."""


class ReplacementFailedError(CsvTableImportError):
    """持有匹配句柄，但替换次数为0（扫描后文本可能已被修改）."""


class StaleMatchError(CsvTableImportError):
    """匹配句柄已被使用过，需要重新扫描."""
