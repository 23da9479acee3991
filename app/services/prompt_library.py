# /app/services/prompt_library.py

"""
This file is the central library for every prompt the backend (and the
editor's refine flow) sends to the generative models. Prompts are treated as
code and kept together here so that wording changes are reviewed in one place.
"""

# --- Platform Formatting Instructions ---
# Looked up by the request's `platform`; anything unknown falls back to "standard".
PLATFORM_INSTRUCTIONS = {
    "standard": "Use clear paragraphs with proper spacing.",
    "linkedin": (
        "Format for LinkedIn: Use short paragraphs (2-3 lines), include relevant hashtags at the end, "
        "start with a hook, and use emojis sparingly for emphasis."
    ),
    "facebook": (
        "Format for Facebook: Conversational tone, use line breaks for readability, include a "
        "call-to-action, and make it engaging for social sharing."
    ),
    "medium": (
        "Format for Medium: Use a compelling title suggestion, include subheadings (marked with ##), "
        "write in a storytelling style, and structure with introduction, body, and conclusion."
    ),
    "twitter": (
        "Format for Twitter/X: Create a thread-style format with numbered points, keep each section "
        "under 280 characters, use relevant hashtags."
    ),
    "instagram": (
        "Format for Instagram caption: Start with an attention-grabbing first line, use line breaks, "
        "include relevant emojis, and add hashtags at the end."
    ),
    "blog": (
        "Format as a blog post: Include a catchy title, introduction, multiple sections with subheadings, "
        "bullet points where appropriate, and a conclusion with call-to-action."
    ),
}

DEFAULT_PLATFORM = "standard"


# --- Content Generation Prompt ---
CONTENT_GENERATION_PROMPT = """Generate {content_type} with a {tone} tone, approximately {word_count} words.

Platform: {platform}
Formatting: {platform_instruction}

Content request: {prompt}

IMPORTANT FORMATTING RULES:
1. Use **bold** for key points and important phrases
2. Use bullet points (•) for lists
3. Mark section headings with ## (e.g., "## Benefits of Cloud Computing")
4. Mark sub-headings with ### if needed
5. Highlight main takeaways
6. Make it visually scannable and engaging
7. Use proper spacing between sections

CRITICAL: Provide ONLY the requested content. Do NOT include:
- Meta-commentary like "Here is...", "Here's a breakdown...", "I'll provide..."
- Explanations about what you're doing
- Introductory phrases about the content
- Any text that isn't part of the actual content itself

Start directly with the content."""


# --- Refinement Meta-Prompt (used by the editor's "Refine" action) ---
REFINEMENT_PROMPT = """You are refining existing content. Here is the original content:

---ORIGINAL CONTENT START---
{original_content}
---ORIGINAL CONTENT END---

REFINEMENT REQUEST: {refinement_request}

INSTRUCTIONS:
1. Apply ONLY the specific refinement requested above
2. Keep ALL other aspects of the content exactly the same (tone, structure, formatting, headings)
3. Maintain the same word count (approximately {word_count} words)
4. Preserve all formatting including **bold**, bullet points, and headings
5. Do NOT add meta-commentary or explanations
6. Return ONLY the refined content, nothing else

Provide the refined content now:"""


# --- AI Image Prompt ---
AI_IMAGE_PROMPT = (
    "A high-quality, professional editorial photograph illustrating: {subject}. "
    "Natural lighting, no text, no watermarks, landscape orientation."
)
