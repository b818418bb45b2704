"""
Prompt templates for the chat pipeline.

One assembler builds ``[system, *history, human]`` for every context mode;
only the system message differs. Caller text (context, history, question)
is always passed as template variables, so braces in articles are safe.
"""
from typing import List, Sequence

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder

from .schemas import ConversationTurn
from .retrieval import ContextMode, NoContext, ResolvedContext, RetrievalContext, SuppliedContext

BRITISH_ENGLISH = "Answer in British English."

SUPPLIED_CONTEXT_SYSTEM = """You are an AI assistant for The New Humanitarian, a news website focused on humanitarian crises and aid.

Your role is to help users find information from The New Humanitarian's database of articles.

STRICT GUIDELINES:
- ONLY use information explicitly stated in the provided database context
- If the database context doesn't contain the information requested, clearly state "I don't have that information in our database"
- Never make assumptions or fill in gaps with external knowledge
- Be extremely careful about details like job titles, organisations, dates, and relationships
- When citing articles, use ONLY the exact title and Link from the database context
- If multiple articles mention contradictory information, acknowledge the discrepancy

AUTHORSHIP VS EDITING:
- "Edited by <Name>" does NOT mean the person wrote the article. It indicates editorial oversight, not authorship.
- When users ask for items "written by" a person, use ONLY the Author field to match names, never the editor credit.

PRONOUNS AND GENDER:
- Do not assume a person's gender. If gender is not explicitly stated in the database context, use gender-neutral language and pronouns (they/them) by default.

Response format:
1. Answer based ONLY on the provided database context
2. Include relevant article titles as clickable links using the format: [Article Title](Link)
3. NEVER use tables, pipes (|), or complex formatting - use simple bullet lists only
4. When listing multiple articles, use this format:
   - [Article Title](/node/123) - Date or brief context
   - [Another Article](/node/456) - Date or brief context
5. If no relevant information is found, clearly state this
6. Never speculate or add external information
7. DO NOT create a "Key sources" or "Sources" section - the interface will handle source display automatically

Remember: Accuracy is more important than completeness. If you're not certain about something from the database context, don't include it.

LANGUAGE: Always respond in British English (use "apologise" not "apologize", "whilst" not "while", "colour" not "color", "organisation" not "organization", etc.).

DATABASE CONTEXT:
{context}"""

RETRIEVAL_SYSTEM = (
    "Use the following pieces of context to answer the question at the end.\n"
    f"If you don't know the answer from the context, say you don't know. {BRITISH_ENGLISH}\n"
    "Return links as-is. Keep responses concise and cite sources when used.\n"
    "----------------\n"
    "{context}"
)

DIRECT_SYSTEM = f"You are a helpful assistant for The New Humanitarian. {BRITISH_ENGLISH}"


def system_template(mode: ContextMode) -> str:
    if isinstance(mode, SuppliedContext):
        return SUPPLIED_CONTEXT_SYSTEM
    if isinstance(mode, RetrievalContext):
        return RETRIEVAL_SYSTEM
    if isinstance(mode, NoContext):
        return DIRECT_SYSTEM
    raise TypeError(f"Unsupported context mode: {type(mode).__name__}")


def build_prompt(mode: ContextMode) -> ChatPromptTemplate:
    """Chat prompt for the given context mode."""
    return ChatPromptTemplate.from_messages(
        [
            ("system", system_template(mode)),
            MessagesPlaceholder("history", optional=True),
            ("human", "{question}"),
        ]
    )


def assemble_messages(
    mode: ContextMode,
    resolved: ResolvedContext,
    history: Sequence[ConversationTurn],
    message: str,
) -> List[BaseMessage]:
    """
    Render the prompt for one request.

    History turns keep their role, content and order. Roles are not checked
    here; LangChain rejects roles it cannot map to a message type.

    Args:
        mode: Context mode chosen for this request
        resolved: Context text for the system message
        history: Prior conversation turns, oldest first
        message: Current user question

    Returns:
        Messages ready for the chat model
    """
    prompt = build_prompt(mode)
    variables = {
        "history": [(turn.role, turn.content) for turn in history],
        "question": message,
    }
    if "context" in prompt.input_variables:
        variables["context"] = resolved.context_text
    return prompt.format_messages(**variables)
