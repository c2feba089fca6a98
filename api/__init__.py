"""
API 層：觀戰用的唯讀 endpoint
"""
