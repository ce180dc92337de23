# /app/db/base.py

# Central registry for all SQLAlchemy models. Importing them here guarantees
# that `Base.metadata` knows every table before `create_all` runs.

from .base_class import Base

from .models.user_models import Tenant, User
from .models.class_student_models import StudentProfile, Classroom, Enrollment
from .models.exam_models import Exam, ExamQuestion, ExamSubmission
from .models.homework_models import Homework, HomeworkSubmission
from .models.live_session_models import LiveSession, LiveSessionAttendance
from .models.video_models import VideoLesson, VideoView
from .models.notification_models import Notification
