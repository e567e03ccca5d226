"""项目配置设置."""

from dotenv import load_dotenv
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

# 先加载.env.example（最低优先级），再加载.env（覆盖前者），最后环境变量最高
load_dotenv(dotenv_path=Path(__file__).parent.parent.parent / '.env.example', override=False)
load_dotenv(dotenv_path=Path(__file__).parent.parent.parent / '.env', override=False)


def _split_list(value: str) -> List[str]:
    """把逗号分隔的配置值拆成列表."""
    return [item.strip() for item in value.split(",") if item.strip()]


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class CsvConfig(BaseModel):
    """CSV解析配置."""

    delimiter: str = Field(default_factory=lambda: os.environ.get("CSV_DELIMITER", ","))  # 字段分隔符
    # 读取CSV文件时依次尝试的编码，latin-1放在最后兜底
    encodings: List[str] = Field(
        default_factory=lambda: _split_list(os.environ.get("CSV_ENCODINGS", "utf-8-sig,cp1252,latin-1"))
    )


class PlaceholderConfig(BaseModel):
    """占位符配置."""

    token: str = Field(default_factory=lambda: os.environ.get("PLACEHOLDER_TOKEN", "#table#"))  # 占位符文本
    tags: List[str] = Field(default_factory=lambda: _split_list(os.environ.get("PLACEHOLDER_TAGS", "p")))  # 段落类标签
    container_type: str = Field(default_factory=lambda: os.environ.get("CONTAINER_TYPE", "formattedtext"))  # 富文本节点类型
    sort_children: bool = Field(default_factory=lambda: _env_flag("SORT_CHILDREN", "true"))  # 按名称排序子节点


class LogConfig(BaseModel):
    """日志配置."""

    level: str = Field(default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO"))  # 日志级别
    # 精简日志格式
    format: str = Field(default_factory=lambda: os.environ.get("LOG_FORMAT", "<level>{level: <8}</level>| - <level>{message}</level>"))
    log_file: Optional[str] = Field(default_factory=lambda: os.environ.get("LOG_FILE") or None)  # 日志文件路径，为空则不写文件
    rotation: str = Field(default_factory=lambda: os.environ.get("LOG_ROTATION", "10 MB"))  # 日志轮转大小
    retention: str = Field(default_factory=lambda: os.environ.get("LOG_RETENTION", "1 week"))  # 日志保留时间


class Settings(BaseModel):
    """项目全局设置."""

    csv: CsvConfig = Field(default_factory=CsvConfig)  # CSV相关配置
    placeholder: PlaceholderConfig = Field(default_factory=PlaceholderConfig)  # 占位符相关配置
    log: LogConfig = Field(default_factory=LogConfig)  # 日志相关配置

    project_dir: Path = Field(default_factory=lambda: Path(__file__).parent.parent.parent)  # 项目根目录


# 单例模式，避免多次实例化
_settings = None
def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings

settings = get_settings()
