"""
Backend package for the QSL card service.

Sent and received cards are kept as two JSON array blobs in Tencent COS.
This package provides the collection store, validation and aggregation
layers plus a FastAPI app and a serverless entry point on top of them.
"""
