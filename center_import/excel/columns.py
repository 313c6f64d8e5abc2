"""Accepted header spellings per logical field.

Each tuple is searched in order by ``headers.pick``; the first alias with a
non-blank value wins. Comparison ignores case, spaces, underscores and
hyphens, so only genuinely different words need listing.
"""

# Groups sheet
GROUP_NAME = ("name", "groupName", "guruh", "guruhNomi", "group")
GROUP_TEACHER = ("teacherUsername", "teacher", "teacher_user", "teacherusername")
GROUP_DAYS = ("daysOfWeek", "days", "kunlar", "scheduleDays")
GROUP_START = ("startTime", "start", "boshlanish", "start_time")
GROUP_END = ("endTime", "end", "tugash", "end_time")
GROUP_DESCRIPTION = ("description", "desc", "izoh")
GROUP_SUBJECT = ("subject", "subjectName", "fan", "fanNomi")

# Students sheet
STUDENT_USERNAME = ("username", "user", "login")
STUDENT_PASSWORD = ("password", "pass", "parol")
STUDENT_FIRST_NAME = ("firstName", "firstname", "ism")
STUDENT_LAST_NAME = ("lastName", "lastname", "familiya")
STUDENT_PHONE = ("phone", "telefon", "tel")
STUDENT_GROUP = ("groupName", "group", "guruh")

# Payments sheet
PAYMENT_STUDENT = ("studentUsername", "student", "username", "oquvchiUsername")
PAYMENT_GROUP = ("groupName", "group", "guruh")
PAYMENT_AMOUNT = ("amount", "summa", "to'lov", "tolov")
PAYMENT_DUE_DATE = ("dueDate", "duedate", "sana", "toLovSana")
PAYMENT_STATUS = ("status", "paymentStatus")
PAYMENT_PAID_DATE = ("paidDate", "paiddate", "tolanganSana")
PAYMENT_DESCRIPTION = ("description", "desc", "izoh")
