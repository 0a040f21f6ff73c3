"""Prompt builders for the article agent, writer and request classifier."""

from __future__ import annotations

ARTICLE_DIGEST_LIMIT = 4000

AGENT_INSTRUCTIONS = """You are an AI assistant that helps users create articles in Arabic.

You have these tools:
1. search_web - Search the internet for information
2. generate_article - Create a structured article (returns points that need images)
3. generate_image - Generate an image for a specific article point

When user asks to create an article:
1. Use search_web to find information about the topic
2. Use generate_article to write the article based on search results
3. Check the result for pointsNeedingImages and use generate_image for EACH point that needs an image

IMPORTANT: After creating an article, DO NOT repeat or summarize the article content in your response.
Just say a short confirmation like "تم إنشاء المقال بنجاح! يمكنك مشاهدته على اليمين."
NEVER include the article text, points, or any content from the article in your chat response.

For chat/greetings, respond directly without tools.
Always respond in Arabic."""


def agent_system_prompt() -> str:
    """Return the instructions that seed every agent session."""
    return AGENT_INSTRUCTIONS


def article_system_prompt() -> str:
    """Return the system prompt for structured article writing."""
    return (
        "You are a professional Arabic writer. Write accurate, well organised articles "
        "grounded in the supplied search results and return them in the requested structure."
    )


def article_user_prompt(topic: str, search_results: str) -> str:
    """Return the writing brief for one topic, with the digest cut to size."""
    digest = (search_results or "")[:ARTICLE_DIGEST_LIMIT]
    return (
        f"اكتب مقال احترافي عن: {topic}\n\n"
        f"نتائج البحث:\n{digest}\n\n"
        "المطلوب:\n"
        "- عنوان جذاب\n"
        "- مقدمة شيقة\n"
        "- 4 نقاط رئيسية (كل نقطة لها عنوان ومحتوى تفصيلي ووصف صورة بالإنجليزية)\n"
        "- خاتمة ملخصة\n"
        "- اجعل shouldHaveImage=true لنقطتين فقط من الأربع نقاط"
    )


def decision_prompt(user_message: str) -> str:
    """Return the prompt that routes a message to article generation or chat."""
    return f"""You are an AI assistant that can either generate articles or chat with users.

Analyze this user message and decide what to do:
"{user_message}"

Rules:
- If the user wants to create/generate/write an article, blog post, or detailed content about a topic → use "generate_article" and extract the topic
- If the user is asking questions, greeting, chatting, or anything else → use "chat" and provide a helpful response in Arabic

Examples:
- "اكتب مقال عن الذكاء الاصطناعي" → generate_article, topic: "الذكاء الاصطناعي"
- "Create an article about climate change" → generate_article, topic: "climate change"
- "مرحبا" → chat, response: "مرحباً! كيف يمكنني مساعدتك اليوم؟"
- "اعمل مقال عن السياحة في مصر" → generate_article, topic: "السياحة في مصر"

Respond appropriately based on the user's intent."""


MARKDOWN_INSTRUCTIONS = """You are an expert article writer with access to web search and image generation tools.

Your workflow:
1. First, use search_web to find current information about the topic
2. Write a comprehensive article based on the search results
3. Use generate_illustration to create 1-2 relevant illustrations for key sections

Article requirements:
- Clear introduction and conclusion
- Multiple detailed sections with ## headings
- Markdown formatting
- Include recent data and developments from search results
- At least 500 words"""


def markdown_system_prompt() -> str:
    """Return the instructions for the free-form markdown writer."""
    return MARKDOWN_INSTRUCTIONS


def markdown_user_prompt(topic: str) -> str:
    return (
        f"Research and write a comprehensive article about: {topic}. "
        "Use the search tool to find current information, then write the article "
        "with generated images for key sections."
    )
