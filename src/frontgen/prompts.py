"""System instructions, example prompts and placeholder texts."""

import re

INITIAL_CODE = "// Your generated code will appear here..."
NEW_CHAT_CODE = "// Start a new chat by typing a prompt or choosing an example."
EMPTY_CHAT_CODE = "// This chat is empty."

ERROR_PREFIX = "// Error: "
_GENERATING_RE = re.compile(r"^// Generating [A-Z]+ code, please wait\.\.\.$")


def generating_code(framework: str) -> str:
    return f"// Generating {framework.upper()} code, please wait..."


def error_code(message: str) -> str:
    return f"{ERROR_PREFIX}{message}"


def has_artifact(code: str | None) -> bool:
    """Return True if ``code`` is real output rather than one of our placeholders.

    Generated code may itself start with a ``//`` comment, so only the known
    placeholder texts are excluded.
    """
    if not code:
        return False
    if code in (INITIAL_CODE, NEW_CHAT_CODE, EMPTY_CHAT_CODE):
        return False
    return not (code.startswith(ERROR_PREFIX) or _GENERATING_RE.match(code))


SYSTEM_PROMPTS = {
    "html": (
        "You are an expert frontend developer specializing in clean, modern web design "
        "using Tailwind CSS. Your task is to generate a single, self-contained HTML file "
        "based on the user's request. Rules: 1. All HTML, CSS, and JavaScript must be in "
        "one .html file. 2. Use Tailwind CSS for all styling via the CDN "
        '(<script src="https://cdn.tailwindcss.com"></script>). 3. Use placeholder '
        "services like https://placehold.co/ for images. 4. Your response must ONLY "
        "contain the raw HTML code, with no explanations or markdown ticks."
    ),
    "react": (
        "You are an expert React developer who creates clean, functional components. "
        "Your task is to generate a single JSX file for a React functional component "
        "based on the user's request. Rules: 1. Use React hooks (useState, useEffect, "
        "etc.) for any state or logic. 2. Use Tailwind CSS classes for all styling "
        "(assume Tailwind is already configured in the project). 3. Do not include "
        "'import React...' as it is assumed to be available. 4. Your response must ONLY "
        "contain the raw JSX code for the component, starting with "
        "'function ComponentName() { ... }'. Do not include explanations or markdown ticks."
    ),
    "vue": (
        "You are an expert Vue.js developer who builds elegant and efficient single-file "
        "components. Your task is to generate a complete single-file component (.vue) "
        "based on the user's request. Rules: 1. The component must be self-contained "
        "with <template>, <script setup>, and <style scoped> blocks. 2. Use the "
        "Composition API with <script setup>. 3. Use Tailwind CSS classes for all "
        "styling within the <template> block. 4. Your response must ONLY contain the "
        "raw code for the .vue file. Do not include explanations or markdown ticks."
    ),
}

# Example gallery shown under the prompt box. Picking one starts a new chat.
PROMPT_TEMPLATES = [
    {
        "title": "Hero Section",
        "prompt": (
            'A modern, professional hero section for a SaaS product named "CodeGenius". '
            "It should have a catchy title, a short descriptive paragraph, and two buttons: "
            '"Get Started for Free" and "View Pricing".'
        ),
    },
    {
        "title": "Login Form",
        "prompt": (
            'A clean and simple login form with fields for "Email" and "Password", a '
            '"Remember me" checkbox, a "Sign In" button, and a "Forgot your password?" link.'
        ),
    },
    {
        "title": "Pricing Page",
        "prompt": (
            'A pricing page with three tiers: "Basic", "Pro", and "Enterprise". Each tier '
            'should have a title, a price, a short list of key features, and a "Sign Up" '
            'button. The "Pro" tier should be highlighted as the most popular.'
        ),
    },
    {
        "title": "Contact Form",
        "prompt": (
            'A contact form with fields for "Full Name", "Email Address", "Subject", and '
            '"Message". Include a "Send Message" submit button.'
        ),
    },
]


def find_template(title: str) -> dict | None:
    for template in PROMPT_TEMPLATES:
        if template["title"] == title:
            return template
    return None
