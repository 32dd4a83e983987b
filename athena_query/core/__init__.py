"""
Core pipeline: submission, polling, retrieval and decoding
"""
