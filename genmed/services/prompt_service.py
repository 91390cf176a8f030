# genmed/services/prompt_service.py
from __future__ import annotations
from typing import Optional

SYSTEM_PROMPT = """You are a helpful assistant that helps Indian patients find affordable generic medicines.

Your goal is to help poor people save money by finding generic alternatives to expensive branded medicines.

CRITICAL: You MUST return your response in a STRUCTURED JSON FORMAT for the UI to display properly.

WORKFLOW - Follow this order:
1. FIRST: Use find_generic_with_prices tool - it combines fast API lookup with Indian price search
2. The tool returns structured data that gets displayed in a comparison table
3. ONLY if it returns too little, fall back to search_medicine, get_medicine_details,
   find_generic_equivalent, get_available_dosages, web_search_medicine or search_india_medicine

IMPORTANT GUIDELINES:
1. Always identify the ACTIVE INGREDIENT (salt) and EXACT DOSAGE
2. Find generic alternatives with the SAME salt and SAME dosage
3. Warn users to NEVER change dosage without consulting a doctor
4. Focus on Indian market - Jan Aushadhi, 1mg, Apollo prices

YOUR RESPONSE FORMAT - Return a JSON object with this structure:
{
  "comparison": {
    "branded": {
      "name": "Brand name",
      "salt": "Active ingredient",
      "dosage": "500mg",
      "price": "₹XX per tablet",
      "pricePerStrip": "₹XX for 10 tablets"
    },
    "generic": {
      "name": "Generic name",
      "salt": "Same active ingredient",
      "dosage": "500mg",
      "price": "₹XX per tablet",
      "pricePerStrip": "₹XX for 10 tablets",
      "savings": "XX%"
    }
  },
  "alternatives": [
    {"name": "Alternative 1", "salt": "...", "price": "₹XX", "source": "1mg/Apollo"},
    {"name": "Alternative 2", "salt": "...", "price": "₹XX", "source": "..."}
  ],
  "description": "Detailed explanation text here..."
}

List at most 5 alternatives.
If you cannot find structured data, still provide the description field with helpful information."""


class PromptService:
    """Prompts for the agent and for the search-grounded lookups."""

    def system_prompt(self) -> str:
        return SYSTEM_PROMPT

    def price_prompt(self, medicine_name: str, active_ingredient: Optional[str] = None) -> str:
        salt = active_ingredient or medicine_name
        return (
            f'Find current medicine prices in India for "{medicine_name}" (salt: {salt}):\n\n'
            "IMPORTANT: Return factual price data. Search for:\n"
            "1. Branded medicine price from 1mg.com or Apollo Pharmacy\n"
            "2. Generic alternatives with prices\n"
            "3. At least 5 alternative generic brands with prices\n\n"
            "For EACH medicine, provide:\n"
            "- Name\n"
            "- Price in INR (₹)\n"
            "- Source (1mg, Apollo, Jan Aushadhi, etc.)\n\n"
            "Format the prices clearly in INR (₹). Include per-tablet and per-strip prices where available. "
            "Do NOT include purchase links or how to buy information."
        )

    def web_search_prompt(self, search_query: str) -> str:
        return (
            f"Search for: {search_query}\n\n"
            "Please provide accurate, up-to-date information about:\n"
            "1. Medicine prices (if asked)\n"
            "2. Comparison between generic and branded prices\n"
            "3. Any relevant warnings or information\n\n"
            "Focus on helping people find affordable medicine options. "
            "Do NOT include purchase links or how to buy information."
        )

    def india_prompt(self, medicine_name: str) -> str:
        return (
            f'Search for information about "{medicine_name}" medicine in India:\n\n'
            "1. What is the generic name and salt composition?\n"
            "2. What is the approximate price range for generic vs branded versions in India?\n"
            "3. Is it available at Jan Aushadhi Kendras (government generic medicine stores)?\n"
            "4. What are the popular generic brands available in India?\n"
            "5. Any important information patients should know?\n\n"
            "Focus on helping Indian patients find affordable generic alternatives. "
            "Include specific Indian brand names and prices in INR if available."
        )
