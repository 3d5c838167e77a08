import os

DEFAULT_SYSTEM_PROMPT = (
    "You are `{bot_name}`: a simple, helpful, and friendly chatbot. You adhere to the three laws "
    "of robotics. This is a Discord chat, so keep your responses concise and "
    "conversational. Mimic the conversation style of those that you are interacting with. "
    "Avoid using long, heavily formatted responses. Do not repeat back any metadata "
    "enclosed in angle brackets."
)

DEFAULT_REPLY_DECISION_PROMPT = (
    'This prompt is meant to only produce a "yes" or "no" response in back-end code. DO NOT '
    "CONVERSE.\n\n"
    "This is a multi-user chat conversation. Evaluate the conversation to determine whether "
    "or not you are the target of the latest message. `addressed_target` should equal the "
    "user or person that the latest message is addressing, not the name of the sender. "
    'Your name is "{bot_name}". You should not reply every time a user sends a message.\n\n'
    "You should reply if:\n"
    '  1. You ("{bot_name}") are the conversation target,\n'
    "  2. You are engaged as a participant in a conversation already, or\n"
    "  3. You have a unique perspective to add to the conversation.\n\n"
    "Avoid responding if you have been responding frequently and multiple participants "
    "are actively chatting. Avoid stringing conversations on for too long with a lot of "
    "follow-up questions. If you have nothing to add, you should not reply.\n\n"
    "Are you going to respond to this message?\n"
    'Respond in JSON format: `{ "will_respond": "[yes|no]", "reason": "[justification]", '
    '"addressed_target": "[addressed_target]", "bot_is_addressed": "true|false" }`.\n'
    "AGAIN, DO NOT CONVERSE. DO NOT USE MARKDOWN FORMATTING."
)

DEFAULT_DESCRIBE_IMAGE_PROMPT = (
    "Describe this image in reasonable detail. Do not use line breaks. If the image is "
    "unclear, do your best. You are not being asked to identify individuals."
)

DEFAULT_IMAGE_REQUEST_PROMPT = (
    'Is this message an image generation or image edit prompt? Respond with "yes" or "no".'
)

DEFAULT_PERSONA_PROMPT = "Summarize the following messages to build a persona for the user {name}."

DEFAULT_GROUND_DECISION_PROMPT = (
    "This prompt is meant to only produce a true or false response in back-end code. DO NOT "
    "CONVERSE.\n\n"
    "Decide whether a good reply to the latest message needs current information from the "
    "internet, such as news, weather, scores, prices or recent events.\n"
    'Respond in JSON format: `{"willGround": true|false}`. DO NOT USE MARKDOWN FORMATTING.'
)

DEFAULT_GROUNDING_QUERY_PROMPT = (
    "Examine this conversation and identify any information gaps or questions that may need "
    "up-to-date information from the internet to answer.\n"
    "Do not summarize the conversation or include any information about the users. Instead, "
    "respond only with a question or prompt that a search grounding API can respond to "
    "in order to augment the conversation.\n"
    "Include either the explicit date and time, or use relative terms such as "
    '"today/tonight/yesterday", but not both. The search API uses UTC.\n'
    "Request a concise response.\n"
    "When requesting information that may return international units of measure, be specific "
    "in requesting US-based sources.\n"
)


class Prompt:
    def __init__(self, config: dict | None = None, bot_name: str = "botc") -> None:
        prompt_cfg = (config or {}).get("botc", {}).get("prompts", {})

        def pick(key: str, env: str, default: str) -> str:
            return str(prompt_cfg.get(key) or os.getenv(env) or default)

        self.SYSTEM_PROMPT: str = pick("system", "SYSTEM_PROMPT", DEFAULT_SYSTEM_PROMPT).replace(
            "{bot_name}", bot_name
        )
        self.REPLY_DECISION_PROMPT: str = pick(
            "reply_decision", "REPLY_DECISION_PROMPT", DEFAULT_REPLY_DECISION_PROMPT
        ).replace("{bot_name}", bot_name)
        self.DESCRIBE_IMAGE_PROMPT: str = pick(
            "describe_image", "DESCRIBE_IMAGE_PROMPT", DEFAULT_DESCRIBE_IMAGE_PROMPT
        )
        self.IMAGE_REQUEST_PROMPT: str = pick(
            "image_request", "IMAGE_REQUEST_PROMPT", DEFAULT_IMAGE_REQUEST_PROMPT
        )
        self.PERSONA_PROMPT: str = pick("persona", "PERSONA_PROMPT", DEFAULT_PERSONA_PROMPT)
        self.GROUND_DECISION_PROMPT: str = pick(
            "ground_decision", "GROUND_DECISION_PROMPT", DEFAULT_GROUND_DECISION_PROMPT
        )
        self.GROUNDING_QUERY_PROMPT: str = pick(
            "grounding_query", "GROUNDING_QUERY_PROMPT", DEFAULT_GROUNDING_QUERY_PROMPT
        )

    def persona_instruction(self, name: str) -> str:
        return self.PERSONA_PROMPT.replace("{name}", name)
