"""
Trick Engine - 回合制吃墩纸牌游戏引擎

服务器权威的共享游戏状态，按房间广播完整快照。

Packages:
    core: 纯领域逻辑（牌组、请求子进程、阶段状态机、规则、快照、不变量）
    application: 会话外壳与配置服务
    server: websocket房间服务器
"""

__version__ = "1.0.0"
