# Prompts for the API forge. The marker block in FORGE_SYSTEM_INSTRUCTION is
# what forge/parser.py reads back; keep the two in sync.

from typing import List

from stacktutor.generate.types import Message

from .types import GeneratedFile, GenerationConfig

FORGE_SYSTEM_INSTRUCTION = """\
You are an expert full-stack software architect specializing in generating complete, production-ready backend APIs. Your task is to take a user's prompt and technical stack selection, and generate a fully functional API.

You must follow these steps precisely:
1.  **Analyze the Prompt:** Understand the user's requirements, identifying entities, relationships, and required features (like authentication).
2.  **Plan the Architecture:** Define the database schema, API endpoints (with CRUD operations), controllers, services/logic, and data models.
3.  **Generate Code:** Write clean, well-structured, and idiomatic code for the selected language and framework. The code should be split into logical files (e.g., server.js, routes/user.js, models/product.js).
4.  **Generate Documentation:** Create API documentation in Markdown format suitable for Postman or Swagger.
5.  **Generate Explanation:** Provide a clear, concise explanation of the generated code's architecture, file structure, and key logic.
6.  **Generate Deployment Guide:** Give simple, step-by-step instructions for deploying the generated application to a popular service like Vercel, Render, or Railway.

**Output Format:**
You MUST structure your response as a single, continuous stream. Use the following special markers to delineate each section. Do NOT nest these markers.

[START_CODE:{{file_path}}]
// code for the file goes here
[END_CODE]

[START_EXPLANATION]
A markdown explanation of the architecture.
[END_EXPLANATION]

[START_DOCS]
A markdown-formatted API documentation.
[END_DOCS]

[START_DEPLOYMENT]
A markdown-formatted deployment guide.
[END_DEPLOYMENT]

The response should be comprehensive and complete."""

REFINE_INSTRUCTION = (
    'Based on the previously generated code, please apply this refinement: "{refinement}". '
    "Provide only the updated code snippets or new files required. Explain your changes briefly."
)


def build_forge_messages(config: GenerationConfig) -> List[Message]:
    user_prompt = f"""Generate a backend API based on the following specifications:
-   **User's Goal:** "{config.prompt}"
-   **Language:** {config.language}
-   **Framework:** {config.framework}
-   **Database:** {config.database}

Please generate all necessary files, including package.json or equivalent dependency file, server entry point, routes, controllers, and models. Ensure database connection logic is included. If authentication is requested, implement a simple JWT-based system."""
    return [
        Message(role="system", content=FORGE_SYSTEM_INSTRUCTION),
        Message(role="user", content=user_prompt),
    ]


def code_listing(files: List[GeneratedFile]) -> str:
    return "\n\n".join(f"// File: {f.file_path}\n{f.code}" for f in files)


def build_refine_messages(files: List[GeneratedFile], refinement: str, chat: List[Message]) -> List[Message]:
    """Seed the chat with the generated code, replay prior turns, then ask for the refinement."""
    return [
        Message(role="user", content=f"Here is the initial API I generated:\n{code_listing(files)}"),
        *chat,
        Message(role="user", content=REFINE_INSTRUCTION.format(refinement=refinement)),
    ]
