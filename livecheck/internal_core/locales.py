from __future__ import annotations

"""
Localized strings the core produces itself.

Design intent:
- Keep verdict keywords and prompt wording in one place per language.
- Fall back to en-US for text lookup; language validation happens in the controller.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class VerdictKeywords:
    true: str
    false: str
    uncertain: str


@dataclass(frozen=True)
class Locale:
    code: str
    name: str
    prompt_template: str
    keywords: VerdictKeywords
    analysis_failed: str
    error_not_supported: str
    error_mic_not_available: str
    error_mic_access_denied: str
    status_initializing: str
    status_ready: str
    status_listening: str
    status_waiting: str

    def build_prompt(self, transcript: str) -> str:
        return self.prompt_template.format(transcript=transcript, language_name=self.name)


DEFAULT_LANGUAGE = "en-US"

_LOCALES: dict[str, Locale] = {
    "en-US": Locale(
        code="en-US",
        name="English (US)",
        prompt_template=(
            "Analyze the following statement for factual accuracy. Start your response with one of "
            "three words: 'True', 'False', or 'Uncertain', followed by a colon, and then a brief, "
            "one-sentence explanation in {language_name}. Statement: \"{transcript}\""
        ),
        keywords=VerdictKeywords(true="True", false="False", uncertain="Uncertain"),
        analysis_failed="Failed to analyze transcript.",
        error_not_supported="Speech recognition is not supported by the connected recognizer.",
        error_mic_not_available="Microphone not available. Check your microphone settings.",
        error_mic_access_denied="Microphone access denied. Please allow it in your browser settings.",
        status_initializing="Initializing microphone...",
        status_ready="Ready to listen",
        status_listening="Listening...",
        status_waiting="Waiting for statement to end...",
    ),
    "es-ES": Locale(
        code="es-ES",
        name="Español (España)",
        prompt_template=(
            "Analiza la siguiente afirmación para verificar su veracidad. Comienza tu respuesta con "
            "una de estas tres palabras: 'Verdadero', 'Falso' o 'Incierto', seguida de dos puntos y "
            "luego una breve explicación de una oración en {language_name}. Afirmación: \"{transcript}\""
        ),
        keywords=VerdictKeywords(true="Verdadero", false="Falso", uncertain="Incierto"),
        analysis_failed="Fallo al analizar la transcripción.",
        error_not_supported="El reconocimiento de voz no es compatible con el reconocedor conectado.",
        error_mic_not_available="Micrófono no disponible. Revisa la configuración de tu micrófono.",
        error_mic_access_denied=(
            "Acceso al micrófono denegado. Por favor, permítelo en la configuración de tu navegador."
        ),
        status_initializing="Inicializando micrófono...",
        status_ready="Listo para escuchar",
        status_listening="Escuchando...",
        status_waiting="Esperando a que termine la declaración...",
    ),
    "fr-FR": Locale(
        code="fr-FR",
        name="Français",
        prompt_template=(
            "Analysez l'exactitude factuelle de la déclaration suivante. Commencez votre réponse par "
            "l'un des trois mots suivants : 'Vrai', 'Faux' ou 'Incertain', suivi de deux points, puis "
            "d'une brève explication d'une phrase en {language_name}. Déclaration : \"{transcript}\""
        ),
        keywords=VerdictKeywords(true="Vrai", false="Faux", uncertain="Incertain"),
        analysis_failed="Échec de l'analyse de la transcription.",
        error_not_supported="La reconnaissance vocale n'est pas prise en charge par le module connecté.",
        error_mic_not_available="Microphone non disponible. Vérifiez les paramètres de votre microphone.",
        error_mic_access_denied=(
            "Accès au microphone refusé. Veuillez l'autoriser dans les paramètres de votre navigateur."
        ),
        status_initializing="Initialisation du microphone...",
        status_ready="Prêt à écouter",
        status_listening="Écoute en cours...",
        status_waiting="En attente de la fin de la déclaration...",
    ),
    "de-DE": Locale(
        code="de-DE",
        name="Deutsch",
        prompt_template=(
            "Analysieren Sie die folgende Aussage auf ihre sachliche Richtigkeit. Beginnen Sie Ihre "
            "Antwort mit einem der drei Wörter: 'Wahr', 'Falsch' oder 'Unsicher', gefolgt von einem "
            "Doppelpunkt und dann einer kurzen Erklärung in einem Satz auf {language_name}. "
            "Aussage: \"{transcript}\""
        ),
        keywords=VerdictKeywords(true="Wahr", false="Falsch", uncertain="Unsicher"),
        analysis_failed="Analyse des Transkripts fehlgeschlagen.",
        error_not_supported="Spracherkennung wird vom verbundenen Erkenner nicht unterstützt.",
        error_mic_not_available="Mikrofon nicht verfügbar. Überprüfen Sie Ihre Mikrofoneinstellungen.",
        error_mic_access_denied=(
            "Mikrofonzugriff verweigert. Bitte erlauben Sie ihn in Ihren Browsereinstellungen."
        ),
        status_initializing="Mikrofon wird initialisiert...",
        status_ready="Bereit zum Zuhören",
        status_listening="Höre zu...",
        status_waiting="Warte auf das Ende der Aussage...",
    ),
    "it-IT": Locale(
        code="it-IT",
        name="Italiano",
        prompt_template=(
            "Analizza la seguente affermazione per l'accuratezza dei fatti. Inizia la tua risposta con "
            "una delle tre parole: 'Vero', 'Falso' o 'Incerto', seguita da due punti e poi una breve "
            "spiegazione di una frase in {language_name}. Dichiarazione: \"{transcript}\""
        ),
        keywords=VerdictKeywords(true="Vero", false="Falso", uncertain="Incerto"),
        analysis_failed="Analisi della trascrizione non riuscita.",
        error_not_supported="Il riconoscimento vocale non è supportato dal riconoscitore collegato.",
        error_mic_not_available="Microfono non disponibile. Controlla le impostazioni del microfono.",
        error_mic_access_denied=(
            "Accesso al microfono negato. Per favore, consentilo nelle impostazioni del browser."
        ),
        status_initializing="Inizializzazione del microfono...",
        status_ready="Pronto per l'ascolto",
        status_listening="In ascolto...",
        status_waiting="In attesa della fine della dichiarazione...",
    ),
    "ja-JP": Locale(
        code="ja-JP",
        name="日本語",
        prompt_template=(
            "次の記述の事実の正確性を分析してください。回答は「真実」、「偽り」、「不確か」のいずれかの単語で始め、"
            "コロンを付け、次に{language_name}で短い一文の説明を続けてください。記述：「{transcript}」"
        ),
        keywords=VerdictKeywords(true="真実", false="偽り", uncertain="不確か"),
        analysis_failed="文字起こしの分析に失敗しました。",
        error_not_supported="接続された認識エンジンでは音声認識がサポートされていません。",
        error_mic_not_available="マイクが利用できません。マイクの設定を確認してください。",
        error_mic_access_denied="マイクへのアクセスが拒否されました。ブラウザの設定で許可してください。",
        status_initializing="マイクを初期化しています...",
        status_ready="聞き取り準備完了",
        status_listening="聞き取り中...",
        status_waiting="発言の終了を待っています...",
    ),
    "ko-KR": Locale(
        code="ko-KR",
        name="한국어",
        prompt_template=(
            "다음 진술의 사실 정확도를 분석하십시오. 답변은 '사실', '거짓' 또는 '불확실' 세 단어 중 하나로 "
            "시작하고 콜론을 붙인 다음 {language_name}로 된 간결한 한 문장 설명을 덧붙이십시오. "
            "진술: \"{transcript}\""
        ),
        keywords=VerdictKeywords(true="사실", false="거짓", uncertain="불확실"),
        analysis_failed="녹취록 분석에 실패했습니다.",
        error_not_supported="연결된 인식기에서 음성 인식을 지원하지 않습니다.",
        error_mic_not_available="마이크를 사용할 수 없습니다. 마이크 설정을 확인하세요.",
        error_mic_access_denied="마이크 접근이 거부되었습니다. 브라우저 설정에서 허용해 주세요.",
        status_initializing="마이크 초기화 중...",
        status_ready="들을 준비 완료",
        status_listening="듣는 중...",
        status_waiting="문장이 끝나기를 기다리는 중...",
    ),
    "pt-BR": Locale(
        code="pt-BR",
        name="Português (Brasil)",
        prompt_template=(
            "Analise a seguinte afirmação quanto à sua precisão factual. Comece sua resposta com uma "
            "das três palavras: 'Verdadeiro', 'Falso' ou 'Incerto', seguida por dois pontos e, em "
            "seguida, uma breve explicação de uma frase em {language_name}. Afirmação: \"{transcript}\""
        ),
        keywords=VerdictKeywords(true="Verdadeiro", false="Falso", uncertain="Incerto"),
        analysis_failed="Falha ao analisar a transcrição.",
        error_not_supported="O reconhecimento de fala não é suportado pelo reconhecedor conectado.",
        error_mic_not_available="Microfone não disponível. Verifique as configurações do seu microfone.",
        error_mic_access_denied=(
            "Acesso ao microfone negado. Por favor, permita nas configurações do seu navegador."
        ),
        status_initializing="Inicializando microfone...",
        status_ready="Pronto para ouvir",
        status_listening="Ouvindo...",
        status_waiting="Aguardando o final da declaração...",
    ),
    "ru-RU": Locale(
        code="ru-RU",
        name="Русский",
        prompt_template=(
            "Проанализируйте следующее утверждение на предмет фактической точности. Начните свой ответ "
            "с одного из трех слов: 'Правда', 'Ложь' или 'Неопределенно', за которым следует "
            "двоеточие, а затем краткое объяснение в одном предложении на {language_name}. "
            "Утверждение: \"{transcript}\""
        ),
        keywords=VerdictKeywords(true="Правда", false="Ложь", uncertain="Неопределенно"),
        analysis_failed="Не удалось проанализировать транскрипцию.",
        error_not_supported="Распознавание речи не поддерживается подключенным распознавателем.",
        error_mic_not_available="Микрофон недоступен. Проверьте настройки микрофона.",
        error_mic_access_denied=(
            "Доступ к микрофону запрещен. Пожалуйста, разрешите его в настройках вашего браузера."
        ),
        status_initializing="Инициализация микрофона...",
        status_ready="Готов к прослушиванию",
        status_listening="Слушаю...",
        status_waiting="Ожидание окончания высказывания...",
    ),
    "zh-CN": Locale(
        code="zh-CN",
        name="中文 (普通话)",
        prompt_template=(
            "分析以下陈述的事实准确性。您的回答应以“真实”、“虚假”或“不确定”三个词中的一个开头，后跟一个冒号，"
            "然后是{language_name}的简短单句解释。陈述：“{transcript}”"
        ),
        keywords=VerdictKeywords(true="真实", false="虚假", uncertain="不确定"),
        analysis_failed="转录分析失败。",
        error_not_supported="所连接的识别器不支持语音识别。",
        error_mic_not_available="麦克风不可用。请检查您的麦克风设置。",
        error_mic_access_denied="麦克风访问被拒绝。请在您的浏览器设置中允许访问。",
        status_initializing="正在初始化麦克风...",
        status_ready="准备聆听",
        status_listening="正在聆听...",
        status_waiting="正在等待语句结束...",
    ),
    "hi-IN": Locale(
        code="hi-IN",
        name="हिन्दी",
        prompt_template=(
            "निम्नलिखित कथन की तथ्यात्मक सटीकता का विश्लेषण करें। अपनी प्रतिक्रिया 'सत्य', 'असत्य', या "
            "'अनिश्चित' इन तीन शब्दों में से किसी एक से शुरू करें, उसके बाद एक कोलन और फिर {language_name} "
            "में एक संक्षिप्त, एक-वाक्य स्पष्टीकरण दें। कथन: \"{transcript}\""
        ),
        keywords=VerdictKeywords(true="सत्य", false="असत्य", uncertain="अनिश्चित"),
        analysis_failed="ट्रांसक्रिप्ट का विश्लेषण करने में विफल।",
        error_not_supported="कनेक्ट किया गया पहचानकर्ता वाक् पहचान का समर्थन नहीं करता।",
        error_mic_not_available="माइक्रोफ़ोन उपलब्ध नहीं है। अपनी माइक्रोफ़ोन सेटिंग जांचें।",
        error_mic_access_denied="माइक्रोफ़ोन एक्सेस अस्वीकृत। कृपया इसे अपनी ब्राउज़र सेटिंग में अनुमति दें।",
        status_initializing="माइक्रोफ़ोन प्रारंभ हो रहा है...",
        status_ready="सुनने के लिए तैयार",
        status_listening="सुन रहा है...",
        status_waiting="कथन समाप्त होने की प्रतीक्षा में...",
    ),
}


def is_supported(code: str) -> bool:
    return code in _LOCALES


def get_locale(code: str) -> Locale:
    return _LOCALES.get(code) or _LOCALES[DEFAULT_LANGUAGE]


def supported_languages() -> list[dict[str, str]]:
    return [{"code": locale.code, "name": locale.name} for locale in _LOCALES.values()]
