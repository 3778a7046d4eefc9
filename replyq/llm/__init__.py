"""Generation: prompt templates, the backend gateway and the Gemini model."""
