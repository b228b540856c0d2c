"""Static metadata describing QuizDesk."""

APP_NAME = "QuizDesk"
APP_VERSION = "0.1"
APP_ABOUT_TEXT = (
    "QuizDesk is a browser-based quiz desk built with FastAPI. "
    "Admins paste or upload quizzes and review submissions; respondents take quizzes "
    "and download their results once a submission is approved."
)

PASTE_FORMAT_HELP = (
    "Paste one block per question. Lines starting with 'Part ' are ignored.\n\n"
    "What is the capital of France?\n"
    "a) London\nb) Berlin\nc) Paris\nd) Madrid\n"
    "✅ Correct Answer: c\n\n"
    "Which planet is known as the Red Planet?\n"
    "a) Venus\nb) Mars\nc) Jupiter\nd) Saturn\n"
    "✅ Correct Answer: b"
)

UPLOAD_FORMAT_HELP = """{
  "title": "Sample Quiz",
  "description": "Optional description",
  "questions": [
    {"question": "Pick one", "type": "multiple-choice",
     "options": ["A", "B", "C", "D"], "correctAnswer": "A"},
    {"question": "The sky is blue", "type": "true-false", "correctAnswer": "True"},
    {"question": "Name the primary colours", "type": "enumeration",
     "options": ["Red", "Blue", "Yellow", "Green"],
     "correctAnswer": ["Red", "Blue", "Yellow"]}
  ]
}"""
