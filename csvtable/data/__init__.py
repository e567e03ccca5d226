"""数据处理模块."""

"""
csvtable/data/
├── __init__.py
├── errors.py          # 异常定义
├── models.py          # 数据模型定义（匹配句柄、替换结果）
├── node.py            # 文档节点接口
├── xml_tree.py        # XML文档树适配器
├── document_io.py     # 文档与CSV文件读写
├── placeholder.py     # 占位符匹配规则
├── scanner.py         # 文档树扫描
├── substitution.py    # 占位符替换
├── csv_decoder.py     # CSV解析
├── sanitizer.py       # 文本清洗与转义
└── table_builder.py   # 表格标记生成
"""
