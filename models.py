
# Model constants
gpt35turbo = "gpt-3.5-turbo"
gpt4omini = "gpt-4o-mini"
gpt41mini = "gpt-4.1-mini"
openai41mini = "openai/gpt-4.1-mini"
openai41 = "openai/gpt-4.1"
googleflash = "google/gemini-2.5-flash-preview-09-2025"
haiku45 = "claude-haiku-4-5"
sonnet45 = "claude-sonnet-4-5"

# The token budget in config.py was sized for this model's 4k context
MAIN_MODEL = gpt35turbo
