"""
Report prompt generation for the comprehensive synthesis phase.
"""

from dataclasses import dataclass


@dataclass
class ContentBlock:
    """One piece of gathered content fed to the report writer."""

    step: str
    content: str
    url: str


def generate_analysis_prompt(title: str, description: str, blocks: list[ContentBlock]) -> str:
    """
    Build the analyst prompt for a comprehensive report.

    Args:
        title: Mission title
        description: Mission description (the research topic)
        blocks: Content gathered from completed steps

    Returns:
        Prompt text for a single completion call
    """
    research_data = "".join(
        f"### Source {index} ({block.step}):\n{block.content}\nURL: {block.url}\n\n"
        for index, block in enumerate(blocks, 1)
    )

    return f"""You are a research analyst tasked with creating a comprehensive analysis report based on extensive research data.

RESEARCH TOPIC: {title}
RESEARCH DESCRIPTION: {description}

RESEARCH DATA:
{research_data}
Please analyze all the above information and create a comprehensive research report with the following structure:

## Executive Summary
Provide a concise 2-3 paragraph overview of the key findings and insights.

## Detailed Analysis
Break down the research into 4-6 major themes or categories. For each theme:
- Summarize the key points
- Highlight important statistics or facts
- Note any conflicting information or different perspectives

## Key Findings
List 8-10 specific, actionable findings that emerged from the research.

## Trends and Patterns
Identify any recurring themes, trends, or patterns across the different sources.

## Implications and Significance
Discuss what these findings mean and why they matter.

## Recommendations
Provide 5-7 specific recommendations based on the research.

## Areas for Further Research
Suggest 3-5 areas where additional research would be valuable.

Please ensure the analysis is:
- Comprehensive and thorough
- Based solely on the provided research data
- Well-structured and easy to read
- Professional in tone
- Includes specific references to the data where appropriate

Do not include a sources section as this will be handled separately."""
