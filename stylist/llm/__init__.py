"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Build the stylist prompt from shopper preferences and ranked candidates.
- Call the Groq LLM for a styling narrative, colour palette and product picks.
- Recover a structured pick from whatever text the model returns.
"""
