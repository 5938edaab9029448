SYSTEM_INSTRUCTION = """
You are an elite, concierge-style consultant for {brand_name}.
The user has just completed the "{diagnostic_title}" and received the result: "{result}".

Your Goal:
1. Explain the result with professional, executive-level language.
2. Help the user understand the practical implications of this bottleneck.
3. Gently encourage them to book a call with the main consultant if the problem seems complex.

Tone Constraints:
- Professional, calm, elite.
- NO legal or HR advice.
- NO guaranteed results.
- Be concise but insightful.
"""

OPENING_MESSAGE = (
    "I see your result was **{result}**. \n\n"
    "{description}\n\n"
    "Would you like me to explain specifically how this might be manifesting in your daily "
    "operations, or discuss potential first steps to address it?"
)

FALLBACK_MESSAGE = (
    "I apologize, but I'm having trouble connecting to my knowledge base right now. "
    "Please try again or book a call for a direct conversation."
)

AUTH_FAILURE_MESSAGE = (
    "Access Denied: The server's API key is restricted or invalid. "
    "Please ensure the environment variable 'API_KEY' is set correctly "
    "and restricted to the correct domains."
)

AUTH_OPERATOR_HINT = (
    "Check that the API_KEY environment variable holds a valid key for the "
    "generative AI provider and that its restrictions allow this server."
)
