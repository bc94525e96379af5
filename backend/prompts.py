"""Instruction text and response schemas for the generation service.

Schemas use the OpenAPI subset accepted by the Gemini ``responseSchema``
field. They are advisory for the service; the extractor and the pydantic
models are what actually enforce shape.
"""

SUPPORTED_LANGUAGES = ("en", "vi")

LANGUAGE_NAMES = {
    "en": "English",
    "vi": "Vietnamese",
}


def normalize_language(language: str | None, default: str = "en") -> str:
    lang = (language or default).strip().lower()
    if lang not in SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported language: {language!r}. Valid options: {', '.join(SUPPORTED_LANGUAGES)}")
    return lang


_JSON_ONLY_INSTRUCTION = {
    "en": """You are an API that returns ONLY valid, raw JSON. Your entire response MUST be a single valid JSON object or array as requested.
1. NO MARKDOWN. Never wrap the response in code fences such as ```json.
2. NO EXTRA TEXT. No greeting, commentary or explanation outside the JSON.
3. VALID SYNTAX. Escape every string correctly (newlines as \\n, quotes as \\") and place every comma and bracket correctly.
4. NO GARBAGE. An array ends with ']' and nothing follows it.
5. COMPLETE. Never stop before the JSON value is closed.
Your output is parsed by a machine.""",
    "vi": """Bạn là một API CHỈ trả về JSON thô, hợp lệ. Toàn bộ phản hồi PHẢI là một đối tượng hoặc mảng JSON hợp lệ duy nhất theo yêu cầu.
1. KHÔNG MARKDOWN. Không bọc phản hồi trong khối mã như ```json.
2. KHÔNG VĂN BẢN THỪA. Không lời chào, bình luận hay giải thích ngoài JSON.
3. CÚ PHÁP HỢP LỆ. Thoát chuỗi đúng cách (dòng mới là \\n, dấu ngoặc kép là \\") và đặt đúng mọi dấu phẩy, dấu ngoặc.
4. KHÔNG KÝ TỰ RÁC. Mảng kết thúc bằng ']' và không có gì phía sau.
5. HOÀN CHỈNH. Không dừng trước khi giá trị JSON được đóng.
Đầu ra sẽ được máy phân tích cú pháp.""",
}

_TRANSCRIPTION_INSTRUCTION = {
    "en": """You are an expert transcriptionist. Convert the audio to text, identify the speakers, and follow these rules strictly:
1. JSON FORMAT: The entire response MUST be one raw JSON array that conforms to the schema. No text outside the JSON.
2. FIELDS: Every element contains 'startSeconds', 'speaker' and 'text'.
3. SPEAKERS: Label speakers consistently ('Speaker 1', 'Speaker 2', ...). Never change a speaker's label midway.
4. TIMESTAMPS: 'startSeconds' is the precise start of the utterance in seconds from the beginning of this audio, strictly chronological.
5. CONTENT:
   - Transcribe verbatim, keeping filler words ('uh', 'um').
   - NEVER repeat a segment or sentence. Each segment is unique.
   - NEVER summarize or paraphrase.
6. NO SPEECH: If the audio contains no speech, return an empty array []. Otherwise transcribe to the very end of the audio.""",
    "vi": """Bạn là chuyên gia gỡ băng âm thanh. Chuyển âm thanh thành văn bản, xác định người nói và tuân thủ nghiêm ngặt các quy tắc sau:
1. ĐỊNH DẠNG JSON: Toàn bộ phản hồi PHẢI là một mảng JSON thô duy nhất theo schema. Không có văn bản ngoài JSON.
2. TRƯỜNG DỮ LIỆU: Mỗi phần tử chứa 'startSeconds', 'speaker' và 'text'.
3. NGƯỜI NÓI: Gán nhãn nhất quán ('Người nói 1', 'Người nói 2', ...). Không đổi nhãn giữa chừng.
4. DẤU THỜI GIAN: 'startSeconds' là thời điểm bắt đầu chính xác tính bằng giây từ đầu đoạn âm thanh này, tăng dần theo thời gian.
5. NỘI DUNG:
   - Gỡ băng nguyên văn, giữ lại các từ đệm ('ờ', 'à', 'ừm').
   - TUYỆT ĐỐI KHÔNG lặp lại đoạn hay câu nào.
   - TUYỆT ĐỐI KHÔNG tóm tắt hay diễn giải.
6. KHÔNG CÓ LỜI NÓI: Nếu âm thanh không có lời nói, trả về mảng rỗng []. Nếu có, gỡ băng đến hết âm thanh.""",
}

_TRANSCRIPTION_PROMPT = {
    "en": "Please transcribe the following English audio and identify the speakers. Strictly follow the JSON schema.",
    "vi": "Vui lòng gỡ băng tệp âm thanh tiếng Việt sau và xác định người nói. Tuân thủ nghiêm ngặt schema JSON.",
}

_ANALYSIS_PROMPT = {
    "en": """ROLE: You are a meticulous meeting secretary and analyst. Distill the raw meeting transcript below into formal, objective, actionable minutes.

OBJECTIVE: Produce one JSON object, 100% grounded in the transcript, that conforms to the response schema.

RULES
1. ZERO FABRICATION
- Do not infer intent. A suggestion ("we should do X") is NOT a decision unless it was explicitly agreed ("OK, let's go with X"). Unconfirmed suggestions go in 'notesAndReferences'.
- If information is missing (owner, deadline, ...) use null, or "[Unspecified]" where the schema asks for text. Never guess.
- Every statement must be traceable to the transcript.
2. FIDELITY
- Keep figures, names and titles exact.
- Record unclear content in 'notesAndReferences' marked "[Content unclear, needs re-validation]".
3. DEFINITIONS
- Decision: a final, confirmed agreement.
- Action item: a specific, delegable task; identify owner and deadline when stated.
- Discussion summary: concise Markdown ('##' headings, '*' bullets) that does NOT repeat what is already listed under decisions or action items.
4. OUTPUT: a single JSON object, no markdown fences, no explanation.
{hint_section}
---
MEETING TRANSCRIPT:
{transcript}
---
""",
    "vi": """VAI TRÒ: Bạn là thư ký và chuyên viên phân tích cuộc họp cực kỳ tỉ mỉ. Hãy chắt lọc bản ghi cuộc họp thô dưới đây thành biên bản chính thức, khách quan và có tính hành động.

MỤC TIÊU: Tạo một đối tượng JSON duy nhất, dựa 100% vào bản ghi, tuân thủ schema phản hồi.

QUY TẮC
1. KHÔNG BỊA ĐẶT
- Không suy diễn ý định. Một đề xuất ("chúng ta nên làm X") KHÔNG phải là quyết định trừ khi được chốt rõ ràng ("Ok, chốt làm X"). Đề xuất chưa chốt đưa vào 'notesAndReferences'.
- Nếu thiếu thông tin (người phụ trách, thời hạn, ...) dùng null, hoặc "[Chưa xác định]" khi schema yêu cầu văn bản. Không tự điền.
- Mọi thông tin phải truy được về bản ghi.
2. TRUNG THỰC
- Giữ chính xác số liệu, tên riêng, chức danh.
- Nội dung chưa rõ ghi vào 'notesAndReferences' kèm "[Nội dung chưa rõ, cần xác thực lại]".
3. ĐỊNH NGHĨA
- Quyết định: sự thống nhất cuối cùng đã được xác nhận.
- Công việc: nhiệm vụ cụ thể, có thể giao; xác định người phụ trách và thời hạn nếu được nêu.
- Tóm tắt thảo luận: Markdown ngắn gọn ('##' cho chủ đề, '*' cho gạch đầu dòng), KHÔNG lặp lại nội dung đã có trong quyết định hay công việc.
4. ĐẦU RA: một đối tượng JSON duy nhất, không markdown, không giải thích.
{hint_section}
---
BẢN GHI CUỘC HỌP:
{transcript}
---
""",
}

_HINT_SECTION = {
    "en": "\n---\nADDITIONAL GUIDANCE FROM USER (PRIORITIZE THIS GUIDANCE):\n{hint}\n---\n",
    "vi": "\n---\nHƯỚNG DẪN BỔ SUNG TỪ NGƯỜI DÙNG (ƯU TIÊN HƯỚNG DẪN NÀY):\n{hint}\n---\n",
}

TRANSCRIPTION_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "startSeconds": {
                "type": "NUMBER",
                "description": "Start of the segment in seconds from the beginning of the audio.",
            },
            "speaker": {"type": "STRING", "description": "Speaker label, e.g. 'Speaker 1'."},
            "text": {"type": "STRING", "description": "Verbatim text of the segment."},
        },
        "required": ["startSeconds", "speaker", "text"],
    },
}

_NULLABLE_STRING = {"type": "STRING", "nullable": True}

ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "overview": {
            "type": "OBJECT",
            "properties": {
                "topic": {"type": "STRING"},
                "dateTime": {"type": "STRING", "description": "'[Unspecified]' if not mentioned."},
                "location": {"type": "STRING", "description": "'[Unspecified]' if not mentioned."},
                "attendees": {
                    "type": "ARRAY",
                    "items": {"type": "STRING"},
                    "description": "Append '(Host)' to the host's name when identifiable.",
                },
            },
            "required": ["topic", "dateTime", "location", "attendees"],
        },
        "mainObjectives": {"type": "ARRAY", "items": {"type": "STRING"}, "description": "1-2 core objectives."},
        "discussionSummary": {"type": "STRING", "description": "Markdown: '##' topics, '*' bullets."},
        "decisions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {"decision": {"type": "STRING"}},
                "required": ["decision"],
            },
        },
        "actionItems": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "task": {"type": "STRING"},
                    "owner": _NULLABLE_STRING,
                    "collaborators": _NULLABLE_STRING,
                    "deadline": _NULLABLE_STRING,
                    "notes": _NULLABLE_STRING,
                },
                "required": ["task", "owner", "collaborators", "deadline", "notes"],
            },
        },
        "pendingIssues": {"type": "ARRAY", "items": {"type": "STRING"}},
        "notesAndReferences": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": [
        "overview", "mainObjectives", "discussionSummary", "decisions",
        "actionItems", "pendingIssues", "notesAndReferences",
    ],
}


def json_only_instruction(language: str) -> str:
    return _JSON_ONLY_INSTRUCTION[language]


def transcription_instruction(language: str) -> str:
    return _TRANSCRIPTION_INSTRUCTION[language]


def transcription_prompt(language: str) -> str:
    return _TRANSCRIPTION_PROMPT[language]


def analysis_prompt(transcript: str, language: str, hint: str | None = None) -> str:
    hint_section = _HINT_SECTION[language].format(hint=hint.strip()) if hint and hint.strip() else ""
    return _ANALYSIS_PROMPT[language].format(hint_section=hint_section, transcript=transcript)
