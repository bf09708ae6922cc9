"""
Small pure helpers shared by services and schemas.
"""
