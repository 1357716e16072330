"""
Prompt templates for the ingestion pipeline.

Literal JSON braces are doubled for PromptTemplate's f-string format.

Dependencies: langchain_core
System role: Prompt definitions for identification and analysis
"""

from langchain_core.prompts import PromptTemplate

IDENTIFICATION_PROMPT = PromptTemplate.from_template(
    """From the following text, identify all distinct product names mentioned.
Focus on actual products being described or sold, not general categories or brands unless they clearly refer to a specific product.
Return a valid JSON array of strings, where each string is a product name.
Example: ["Product Alpha X1", "Super Widget Pro", "Basic Gadget"]
If no distinct products are found, return an empty array [].
Return only the JSON array, without markdown formatting or commentary.

Text:
---
{document_text}
---

JSON Array Output:"""
)

ANALYSIS_PROMPT = PromptTemplate.from_template(
    """You are an expert product analyst. Analyze the product named "{entity_name}" based only on the provided text.
The text may describe several products; focus exclusively on "{entity_name}".
Return a single valid JSON object with exactly these keys:
"product_name": the exact product name (string),
"product_type": the product category, e.g. Smartphone, Laptop, Headphones (string or null),
"price": the listed price including currency symbol or unit as written (string or null),
"discounted_price": the sale price if one is mentioned (string or null),
"features": key features (array of strings, may be empty),
"pros": at least 3 advantages (array of strings),
"cons": at least 2 disadvantages (array of strings),
"why_should_i_buy": why a customer should buy it (string or null),
"analysis_summary": a concise 2-3 sentence summary (string or null),
"source_text_snippet": a short quote from the text about this product, at most 150 characters (string or null).
Use null for missing scalar values and [] for missing lists; never omit a key.
Return only the JSON object, without markdown formatting or commentary.

Text:
---
{document_text}
---

JSON Object Output for "{entity_name}":"""
)
