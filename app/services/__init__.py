"""Service layer: Firestore access, Gemini client and risk-analysis logic used by the API routes."""
