"""Infrastructure layer (knowledge corpus, prompts, providers, storage)"""
