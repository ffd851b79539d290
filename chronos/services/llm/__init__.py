from .call_llm import LLMService, content_text, to_lc_messages

__all__ = ['LLMService', 'content_text', 'to_lc_messages']
