"""
Core Module - 纯领域逻辑层

该模块包含吃墩类纸牌游戏的核心业务逻辑。
核心模块只能依赖其他核心模块，不能依赖应用层或传输层。

Modules:
    deck: 牌的编码、计分和牌组管理
    requests: 等待玩家输入的请求子进程
    state_machine: 回合/阶段状态机和阶段处理器
    rules: 出牌规则、吃墩判定和状态变更动作
    events: 领域事件系统
    snapshot: 对外快照
    invariant: 不变量检查
"""
