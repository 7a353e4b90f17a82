"""Provider-facing prompt templates (search and research planning)."""


def build_search_prompt(query: str) -> str:
    """Prompt sent to the search-enabled model for a single research step."""
    return f"""Please provide comprehensive research on: {query}

Please include:
1. Key findings and insights
2. Recent developments
3. Important facts and statistics
4. Relevant examples or case studies
5. Expert opinions or analysis

Format your response in a structured way with clear sections."""


def build_planning_prompt(topic: str) -> str:
    """Prompt asking the model for a JSON research plan."""
    return f"""You are a research planning expert. Given a research topic, you need to create a dynamic, intelligent research plan with 3-10 steps based on the complexity and nature of the topic.

RESEARCH TOPIC: {topic}

Please analyze this research topic and create a comprehensive research plan. Consider:
- The complexity and scope of the topic
- The type of research needed (market research, technical analysis, comparative study, etc.)
- The logical flow of information gathering
- What specific aspects need to be investigated

Return a JSON array of research steps with the following structure:
[
  {{
    "title": "Step title (concise, actionable)",
    "description": "Detailed description of what to research in this step",
    "priority": "high|medium|low",
    "estimatedDuration": "estimated time like '1-2 hours', '30 minutes', etc."
  }}
]

Guidelines:
- Create 3-10 steps based on topic complexity
- Each step should build logically on previous steps
- Steps should be specific and actionable
- Avoid generic steps like "Research background" - be specific about what aspect to research
- Include steps for validation, expert opinions, and current trends when relevant
- For technical topics, include implementation and adoption aspects
- For market research, include competitor analysis and market sizing
- For comparative research, include pros/cons and use cases

Return ONLY the JSON array, no additional text."""
