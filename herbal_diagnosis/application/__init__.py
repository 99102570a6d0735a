"""Application layer (retrieval, context, chains, use cases)"""
