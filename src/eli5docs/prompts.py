"""Prompt text sent to the explanation provider.

Assembly (ordering, optional blocks, numbering) lives in
``eli5docs.backends.protocol``; this module only holds the wording.
"""

SINGLE_PROMPT_INTRO = "Explain this Java code like I'm 5 years old:\n\n"

SINGLE_PROMPT_OUTRO = (
    "\n\nPlease provide a simple, easy-to-understand explanation "
    "that a 5-year-old could grasp."
)

BATCH_PROMPT_INTRO = (
    "Explain these Java code elements like I'm 5 years old. "
    "For each element, provide a simple, easy-to-understand "
    "explanation:\n\n"
)

BATCH_ELEMENT_HEADER = "--- Element {position} ---\n"

# {delimiter} is the exact string the response parser splits on
BATCH_PROMPT_OUTRO = (
    "Please provide explanations for each element, "
    "separated by '{delimiter}' markers."
)

CODE_LINE = "Code: {signature}"
IMPLEMENTATION_BLOCK = "\n\nImplementation:\n{body}"
CONTEXT_BLOCK = "\n\nAdditional context: {prompt}"
