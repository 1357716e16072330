"""
Prompt templates for search, product comparison and chat.

Dependencies: langchain_core
System role: Prompt definitions for generative search, recommendations and support chat
"""

from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder, PromptTemplate

SUPPORT_SYSTEM_PROMPT = """You are a helpful customer support assistant.
Answer using the provided document snippets when they are relevant.
If the snippets do not contain the answer, say so plainly and offer general guidance.
Keep answers concise and friendly."""

SUPPORT_RAG_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", SUPPORT_SYSTEM_PROMPT),
        MessagesPlaceholder("history"),
        (
            "human",
            "Relevant document snippets:\n{context}\n\n"
            "User question: {question}\n\n"
            "Answer based on the snippets above.",
        ),
    ]
)

SUPPORT_FALLBACK_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", SUPPORT_SYSTEM_PROMPT),
        MessagesPlaceholder("history"),
        (
            "human",
            "No relevant support documents were found for this question.\n"
            "User question: {question}\n\n"
            "Answer from general knowledge and mention that no specific documentation matched.",
        ),
    ]
)

SUPPORT_CONVERSATIONAL_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", SUPPORT_SYSTEM_PROMPT),
        MessagesPlaceholder("history"),
        ("human", "{question}"),
    ]
)

GENERATIVE_SEARCH_PROMPT = PromptTemplate.from_template(
    """You are a shopping assistant. Suggest up to {count} real products that match this request: "{query}".
Return only a JSON object of the form {{"results": [...]}} where each element has the keys
"product_name", "product_type", "price", "discounted_price", "features", "pros", "cons",
"why_should_i_buy" and "analysis_summary". Use null for unknown scalar values and [] for unknown lists.
Return only the JSON object, without markdown formatting or commentary."""
)

COMPARE_QUESTIONS_PROMPT = PromptTemplate.from_template(
    """Analyze these products and write {count} distinct questions that help decide which one suits a shopper best.
Give each question 3 or 4 specific answer options that reveal the shopper's preferences.
Return only a JSON array of objects with the keys "id", "text" and "options", where "options" is an array of strings.
Return only the JSON array, without markdown formatting or commentary.

Products:
{products}"""
)

RECOMMENDATION_PROMPT = PromptTemplate.from_template(
    """Recommend the best product for this shopper based on their answers, and explain why.
Return only a JSON object with the keys "recommendedProductId" (the "id" of one product below) and "explanation".
Return only the JSON object, without markdown formatting or commentary.

Products:
{products}

Questions and answers:
{answers}"""
)
