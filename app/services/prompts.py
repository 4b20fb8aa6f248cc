"""Prompt templates sent to Gemini."""
import json
from typing import Any, Dict, List


def _records_json(records: List[Dict[str, Any]]) -> str:
    return json.dumps(records, indent=2, default=str)


def build_chat_prompt(message: str, records: List[Dict[str, Any]]) -> str:
    if records:
        health_context = f"Patient's recent health history:\n{_records_json(records)}"
    else:
        health_context = "No health records available."

    return f"""You are a helpful health assistant.

{health_context}

Patient's question: {message}

Provide helpful health advice based on their health history, but always remind them to consult their doctor for medical decisions. Keep your response concise and easy to understand."""


def build_prediction_prompt(patient: Dict[str, Any], records: List[Dict[str, Any]]) -> str:
    return f"""You are a medical AI analyzing health records for risk prediction.

Analyze this patient's complete health history:
{_records_json(records)}

Patient Information:
- Blood Group: {patient.get("blood_group") or "Not specified"}
- Allergies: {patient.get("allergies") or "None reported"}
- Date of Birth: {patient.get("date_of_birth") or "Not specified"}

Based on this information, provide a comprehensive health risk analysis. You MUST respond with ONLY a valid JSON object in this EXACT format:

{{
  "riskFactors": ["factor1", "factor2", "factor3"],
  "predictions": "Detailed prediction text explaining potential health risks",
  "recommendations": "Detailed recommendations for prevention and management",
  "riskScore": 5
}}

Important:
- riskFactors: Array of specific health risk factors identified (minimum 2, maximum 5)
- predictions: String with detailed health risk predictions (2-3 sentences)
- recommendations: String with actionable health recommendations (numbered list format)
- riskScore: Number from 1-10 (1=very low risk, 10=very high risk)

Respond ONLY with the JSON object, no markdown formatting, no other text before or after."""
