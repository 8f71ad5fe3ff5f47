"""
statkit: 描述性统计与推断统计工具包。

- statkit.core：通用统计算法与基础设施，不包含任何业务逻辑；
- statkit.modules：基于 core 的配置驱动分析模块（如列画像 profile）。
"""

__version__ = "0.1.0"
