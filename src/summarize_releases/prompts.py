"""Default prompts for press-release summaries and the template filler."""

from __future__ import annotations

import re
from typing import Optional

DEFAULT_SYSTEM_PROMPT = """You are an expert financial analyst with deep knowledge of corporate communications, market dynamics, and business strategy. Your role is to analyze press releases and provide actionable insights for investors and business professionals.

Key capabilities:
- Identify financial metrics, revenue impacts, and valuation implications
- Spot growth opportunities, market expansion signals, and competitive advantages
- Recognize potential risks, challenges, and regulatory concerns
- Understand strategic moves, partnerships, and leadership changes

Always provide precise, evidence-based analysis with specific references to the source material."""

DEFAULT_USER_PROMPT_TEMPLATE = """Analyze this press release and provide:

1. A concise executive summary (2-3 sentences)
2. Key highlights categorized as:
   - FINANCIAL: Revenue, earnings, valuations, funding amounts, financial metrics
   - OPPORTUNITY: Growth prospects, market expansion, new products/services, partnerships
   - RISK: Challenges, threats, regulatory issues, market headwinds
   - STRATEGIC: Acquisitions, leadership changes, strategic initiatives, competitive moves

For highlights, provide the exact text from the press release and specify which category it belongs to.

{{COMPANY_NAME ? "Company: " + COMPANY_NAME : ""}}
{{DATE ? "Date: " + DATE : ""}}

Press Release Title: {{TITLE}}

Press Release Content: {{CONTENT}}

Please respond in this exact JSON format:
{
  "summary": "Your 2-3 sentence executive summary here",
  "keyPoints": ["Key point 1", "Key point 2", "Key point 3"],
  "highlights": [
    {
      "type": "financial|opportunity|risk|strategic",
      "text": "exact text from press release",
      "reasoning": "why this is significant"
    }
  ]
}

Important: Only include highlights for text that actually appears in the press release content. Be precise with the text matching."""


def _conditional_re(variable: str) -> re.Pattern:
    # {{VAR ? "prefix" + VAR : "otherwise"}}
    return re.compile(
        r'\{\{' + variable + r'\s*\?\s*"([^"]*?)"\s*\+\s*' + variable + r'\s*:\s*"([^"]*?)"\}\}'
    )


_COMPANY_CONDITIONAL = _conditional_re("COMPANY_NAME")
_DATE_CONDITIONAL = _conditional_re("DATE")


def _fill_conditional(pattern: re.Pattern, template: str, value: Optional[str]) -> str:
    if value:
        return pattern.sub(lambda m: m.group(1) + value, template)
    return pattern.sub(lambda m: m.group(2), template)


def process_template(
    template: str,
    title: str,
    content: str,
    company_name: Optional[str] = None,
    date: Optional[str] = None,
) -> str:
    """Fill {{TITLE}}, {{CONTENT}}, {{COMPANY_NAME}} and {{DATE}} placeholders.

    Conditional placeholders render their prefix plus the value when the value
    is set and their alternative text otherwise.
    """
    processed = _fill_conditional(_COMPANY_CONDITIONAL, template, company_name)
    processed = _fill_conditional(_DATE_CONDITIONAL, processed, date)

    replacements = {
        "{{CONTENT}}": content,
        "{{TITLE}}": title,
        "{{COMPANY_NAME}}": company_name or "",
        "{{DATE}}": date or "",
    }
    for placeholder, value in replacements.items():
        processed = processed.replace(placeholder, value)
    return processed
