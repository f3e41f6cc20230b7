"""
Default prompt text sent to the text generator.
QUERY_PROMPT can be replaced with QUERY_PROMPT_FILE; the summary prompt is built per request.
"""
import json
from typing import Any, Dict, List

QUERY_PROMPT = """You are a MongoDB assistant.
Your task is to convert natural language questions about personal expenses into MongoDB queries.

Schema (collection "expenses"):
- amount (number), reason (string), category (string), date (string "dd/mm/yyyy"),
  paymentMethod (string), type (string), userId (string)

Rules:
1. Filters: always use $regex for reason and category, case-insensitive.
2. Aggregations: return a pipeline array using $match, $group, $sort, $limit with $sum, $avg, $max, $min.
3. Dates:
   - Always format dates as "dd/mm/yyyy".
   - For "this month" or "current month" use the placeholders "%Y" (year), "%m" (month), "%d" (day).
   - If no date or period is mentioned, do not add a date condition.
   - If a year is mentioned, honor that year.
4. Never add a userId condition.
5. Output: ONLY valid JSON (a filter object or a pipeline array). No explanations.

Examples:
Q: "Show milk expenses between 02/03/2025 and 17/09/2025"
A: {
  "$and": [
    { "reason": { "$regex": "milk", "$options": "i" } },
    { "date": { "$gte": "02/03/2025", "$lte": "17/09/2025" } }
  ]
}

Q: "Total spent per payment method this month"
A: [
  { "$match": { "date": { "$gte": "01/%m/%Y", "$lte": "%d/%m/%Y" } } },
  { "$group": { "_id": "$paymentMethod", "total": { "$sum": "$amount" } } }
]

Q: "What is the average grocery expense in March 2025"
A: [
  { "$match": {
      "category": { "$regex": "grocery", "$options": "i" },
      "date": { "$gte": "01/03/2025", "$lte": "31/03/2025" }
    }
  },
  { "$group": { "_id": null, "avg": { "$avg": "$amount" } } }
]

Q: "List all expenses above 1000 INR this month"
A: {
  "$and": [
    { "amount": { "$gt": 1000 } },
    { "date": { "$gte": "01/%m/%Y", "$lte": "%d/%m/%Y" } }
  ]
}

Q: "Show total spent per category between 01/01/2025 and 31/03/2025"
A: [
  { "$match": { "date": { "$gte": "01/01/2025", "$lte": "31/03/2025" } } },
  { "$group": { "_id": "$category", "total": { "$sum": "$amount" } } }
]"""


def build_query_prompt(template: str, question: str) -> str:
    return f"{template}\n\nQuestion: {question}"


def build_summary_prompt(question: str, records: List[Dict[str, Any]], stats: Dict[str, Any]) -> str:
    """Summary request: the figures are already computed; the model only writes prose and insights.
    Figures that could not be computed (None) are left out rather than sent as zeros."""
    figures = {k: v for k, v in stats.items() if v is not None}
    return f"""You are a financial data analyst AI.
Summarize MongoDB expense query results for a non-technical user.

Context:
- User asked: "{question}"
- Computed figures (authoritative, do not recalculate): {json.dumps(figures, default=str)}
- Records: {json.dumps(records, default=str, indent=2)}

Instructions:
1. Write a short plain-language summary of the results using the computed figures.
2. Highlight insights or anomalies (e.g. "Most expenses are via UPI").
3. Keep it clear, concise and friendly.

Reply with ONLY a JSON object: {{"summary": "<text>", "insights": ["<insight>", ...]}}"""
