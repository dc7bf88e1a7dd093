"""
Persona, tool declarations and canned texts for the conversation.

- ``SYSTEM_INSTRUCTION`` - persona handed to every gateway session.
- ``TOOL_SCHEMAS``       - function declarations for the three recognized tools.
- ``WELCOME_TEXT``       - shown for an empty flow; never stored in history.
- ``CATALYSTS``          - starter prompts offered by the clients.
"""

from __future__ import annotations

from typing import Any, Final

SYSTEM_INSTRUCTION: Final = """You are ~flow, a consultant for system architecture, process design and strategic planning. The user is your client; make them faster and clearer.

Working method:
1. Break a new idea into its parts and ask questions until the objective is unambiguous.
2. For processes and systems, produce a Mermaid diagram and a step-by-step plan or document.
3. Write clean, commented, production-ready code in whatever language is requested.
4. Turn action items into a task list with create_task_list; every task gets a priority of High, Medium or Low.
5. Suggest optimizations, point out bottlenecks and challenge assumptions when a better path exists.
6. When the client asks to change something you already produced, update it with modify_artifact instead of presenting a new one.

Tools:
- present_artifact: required for every significant new output (code, documents, plans, Mermaid diagrams).
- modify_artifact: replace the full content of an existing artifact, addressed by its id.
- create_task_list: formalize a set of actions.

Tone: professional, concise, precise."""


TOOL_SCHEMAS: Final[list[dict[str, Any]]] = [
    {
        "name": "present_artifact",
        "description": "Presents a significant piece of content (code, document, plan or diagram) in the artifact viewer.",
        "parameters": {
            "type": "OBJECT",
            "properties": {
                "title": {"type": "STRING", "description": 'Short descriptive title, e.g. "Python Data Scraper".'},
                "type": {"type": "STRING", "description": 'One of "code", "document", "plan", "diagram".'},
                "content": {"type": "STRING", "description": "The full content of the artifact."},
                "language": {"type": "STRING", "description": 'For code artifacts, the language, e.g. "python".'},
            },
            "required": ["title", "type", "content"],
        },
    },
    {
        "name": "create_task_list",
        "description": "Creates a formatted task list in the chat to track project progress.",
        "parameters": {
            "type": "OBJECT",
            "properties": {
                "tasks": {
                    "type": "ARRAY",
                    "items": {
                        "type": "OBJECT",
                        "properties": {
                            "title": {"type": "STRING", "description": "The text of the task."},
                            "priority": {"type": "STRING", "description": 'One of "High", "Medium", "Low".'},
                        },
                        "required": ["title", "priority"],
                    },
                }
            },
            "required": ["tasks"],
        },
    },
    {
        "name": "modify_artifact",
        "description": "Replaces the content of an existing artifact.",
        "parameters": {
            "type": "OBJECT",
            "properties": {
                "artifactId": {"type": "STRING", "description": 'Id of the artifact, e.g. "artifact-3f9c0a1b2d4e".'},
                "newContent": {"type": "STRING", "description": "The new, complete content."},
            },
            "required": ["artifactId", "newContent"],
        },
    },
]


WELCOME_TEXT: Final = """Welcome to .fluid. I am ~flow, your consultant.

**What I do:**
*   **Process design:** describe a workflow and I will map it, usually with a Mermaid diagram.
*   **Code generation:** ask for code and get production-ready snippets.
*   **Task management:** I pick out action items and turn them into task lists.
*   **Artifacts:** larger outputs such as code or documents open in the artifact viewer.

Describe a process, or pick a catalyst to see it in action."""


CATALYSTS: Final[dict[str, str]] = {
    "API Integration": (
        "Design a process for integrating a new third-party REST API into our existing user "
        "management system, including error handling and data synchronization. Present the "
        "final plan as an artifact."
    ),
    "CI/CD Pipeline": (
        "Create a CI/CD pipeline for a web application using a Mermaid diagram. Also, create "
        "a task list for the implementation steps."
    ),
    "Data Processing Script": (
        "Generate a Python script to process a large CSV file: read the data, clean it by "
        "removing duplicates and handling missing values, and then save the result to a new "
        "file. Present the script as a code artifact."
    ),
    "Cloud Infrastructure Setup": (
        "Outline the steps to set up a scalable cloud infrastructure on AWS for a new social "
        "media application, using services like EC2, RDS, and S3. Include a Mermaid diagram "
        "and present the full architecture document as an artifact."
    ),
}


__all__ = ["SYSTEM_INSTRUCTION", "TOOL_SCHEMAS", "WELCOME_TEXT", "CATALYSTS"]
