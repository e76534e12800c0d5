# Import every model module so relationship() strings resolve and
# Base.metadata knows every table (alembic, create_all).
from app.models.user_db.user_db import User  # noqa: F401
from app.models.batch_db.batch_db import Batch, Meeting, meeting_teachers  # noqa: F401
from app.models.purchase_db.purchase_db import Purchase  # noqa: F401
from app.models.quiz_db.quiz_db import Quiz  # noqa: F401
from app.models.quiz_db.quiz_question_db import QuizQuestion  # noqa: F401
from app.models.quiz_db.quiz_option_db import QuizOption  # noqa: F401
from app.models.quiz_db.quiz_attempt_db import QuizAttempt  # noqa: F401
from app.models.quiz_db.quiz_temp_submission_db import QuizTempSubmission  # noqa: F401
from app.models.quiz_db.quiz_submission_db import QuizSubmission  # noqa: F401
from app.models.quiz_db.quiz_result_db import QuizResult  # noqa: F401
