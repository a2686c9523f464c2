"""
Prompts module - relay of prompt cleaning requests to an LLM.

This module handles:
- Tier and model selection
- The LLM client port and its OpenAI adapter
- The clean prompt use case
"""
