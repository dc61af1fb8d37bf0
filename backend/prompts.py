# Prompt templates used when calling the completion API
NUM_QUESTIONS = 15
MAX_PROMPT_CHARS = 3000

SYSTEM_PROMPT = "You are a helpful assistant that outputs valid JSON containing a 'questions' array."

MCQ_PROMPT = (
    "Generate {num_questions} multiple-choice questions based on the following text. "
    "For each question, provide 4 options and indicate the correct answer. "
    "Format response as a JSON object with a 'questions' array where each object has "
    "'question', 'options' (an array), and 'correctAnswer' (index). "
    "Text: {text}"
)


def build_mcq_prompt(text: str) -> str:
    # plain slice, may cut a word in half
    return MCQ_PROMPT.format(num_questions=NUM_QUESTIONS, text=text[:MAX_PROMPT_CHARS])
