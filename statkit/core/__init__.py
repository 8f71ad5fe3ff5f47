# core: 通用底层（统计算法、配置加载、日志、异常）
# 禁止引用 modules 下的任何内容
