"""Conversational assistant: the Anthropic chat loop and its tool catalog."""
