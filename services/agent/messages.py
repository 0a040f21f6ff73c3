# Client-facing status texts (Arabic UI).

ANALYZING = "جاري تحليل الطلب..."
SEARCHING = "جاري البحث..."
WRITING_ARTICLE = "جاري كتابة المقال..."
ARTICLE_READY = "تم إنشاء المقال!"
FINISHED = "تم الانتهاء!"
SESSION_FAILED = "حدث خطأ في معالجة الطلب"
ARTICLE_UNAVAILABLE = "تعذر إنشاء المقال، حاول مرة أخرى."


def search_finished(count: int) -> str:
    return f"تم البحث! وجدت {count} نتائج"


def generating_image(heading: str) -> str:
    return f"جاري توليد صورة: {heading}..."


def generating_image_progress(position: int, total: int) -> str:
    return f"جاري توليد صورة {position} من {total}..."
