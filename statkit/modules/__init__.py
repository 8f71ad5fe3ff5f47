# modules: 基于 core 的配置驱动分析模块
