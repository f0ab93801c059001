"""测试包"""
