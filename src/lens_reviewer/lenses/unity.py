"""Unity/C# lens table."""

from lens_reviewer.lenses.base import (
    Check,
    Domain,
    Lens,
    in_brace_block,
    line_pattern,
    outside_guard,
)

# Per-frame Unity messages
FRAME_LOOP = r"\bvoid\s+(Update|FixedUpdate|LateUpdate|OnGUI)\s*\(\s*\)"

LIFECYCLE = Lens(
    name="lifecycle",
    description="MonoBehaviour message usage and initialization order",
    checks=(
        Check(
            rule_id="UNITY-LC-001",
            description="GetComponent is called every frame inside a per-frame message",
            remediation="Cache the component reference in Awake or Start",
            confidence=90,
            detect=in_brace_block(FRAME_LOOP, r"\bGetComponent(s|InChildren|InParent)?\s*[<(]"),
        ),
        Check(
            rule_id="UNITY-LC-002",
            description="Coroutine is started every frame",
            remediation="Start the coroutine once from Start or in response to an event",
            confidence=85,
            detect=in_brace_block(FRAME_LOOP, r"\bStartCoroutine\s*\("),
        ),
        Check(
            rule_id="UNITY-LC-003",
            description="Empty Unity message still costs a native-to-managed call",
            remediation="Remove the empty method",
            confidence=82,
            detect=line_pattern(
                r"\bvoid\s+(Update|FixedUpdate|LateUpdate|Start|Awake)\s*\(\s*\)\s*\{\s*\}"
            ),
        ),
        Check(
            rule_id="UNITY-LC-004",
            description="String-based Invoke bypasses compile-time checks",
            remediation="Call the method directly or use a coroutine",
            confidence=70,
            detect=line_pattern(r"\bInvoke(Repeating)?\s*\(\s*\""),
        ),
    ),
)

SERIALIZATION = Lens(
    name="serialization",
    description="Inspector-visible state and Unity serializer limits",
    checks=(
        Check(
            rule_id="UNITY-SER-001",
            description="SerializeField on a static member is ignored by the serializer",
            remediation="Make the member an instance field or drop the attribute",
            confidence=92,
            detect=line_pattern(r"\[SerializeField\]\s*(public|private|protected|internal)?\s*static\b"),
        ),
        Check(
            rule_id="UNITY-SER-002",
            description="SerializeField on an auto-property has no effect",
            remediation="Use [field: SerializeField] or a private backing field",
            confidence=88,
            detect=line_pattern(r"\[SerializeField\][^;{]*\{\s*get\s*;"),
        ),
        Check(
            rule_id="UNITY-SER-003",
            description="Unity cannot serialize Dictionary fields",
            remediation="Serialize a list of key/value pairs and build the dictionary in Awake",
            confidence=85,
            detect=line_pattern(r"\[SerializeField\]\s*(private|protected)?\s*Dictionary\s*<"),
        ),
        Check(
            rule_id="UNITY-SER-004",
            description="Public field exposes component state",
            remediation="Prefer a private field marked [SerializeField]",
            confidence=65,
            detect=line_pattern(
                r"^\s*public\s+(?!class|struct|enum|interface|static|const|readonly|override|"
                r"virtual|abstract|void|event|delegate|async|partial|sealed)[\w<>\[\],.]+\s+\w+\s*(=[^;]*)?;"
            ),
        ),
    ),
)

PERFORMANCE = Lens(
    name="performance",
    description="Per-frame cost of engine lookups and reflection",
    checks=(
        Check(
            rule_id="UNITY-PERF-001",
            description="Scene search runs every frame",
            remediation="Look the object up once and cache the reference",
            confidence=93,
            detect=in_brace_block(
                FRAME_LOOP,
                r"\b(GameObject\.Find\w*|FindObjectOfType|FindObjectsOfType|FindFirstObjectByType|"
                r"FindObjectsByType)\s*[<(]",
            ),
        ),
        Check(
            rule_id="UNITY-PERF-002",
            description="Camera.main accessed every frame",
            remediation="Cache Camera.main in a field",
            confidence=75,
            detect=in_brace_block(FRAME_LOOP, r"\bCamera\.main\b"),
        ),
        Check(
            rule_id="UNITY-PERF-003",
            description="SendMessage dispatches through reflection",
            remediation="Call through an interface or a C# event instead",
            confidence=81,
            detect=line_pattern(r"\b(SendMessage|BroadcastMessage|SendMessageUpwards)\s*\("),
        ),
    ),
)

MEMORY = Lens(
    name="memory",
    description="Managed allocations and object churn",
    checks=(
        Check(
            rule_id="UNITY-MEM-001",
            description="Collection allocated every frame creates GC pressure",
            remediation="Allocate once and reuse the collection, clearing it each frame",
            confidence=86,
            detect=in_brace_block(FRAME_LOOP, r"\bnew\s+(List|Dictionary|HashSet|Queue|Stack)\s*<|\bnew\s+\w+\s*\[\s*\w*\s*\]"),
        ),
        Check(
            rule_id="UNITY-MEM-002",
            description="Instantiate called every frame",
            remediation="Use an object pool",
            confidence=84,
            detect=in_brace_block(FRAME_LOOP, r"\bInstantiate\s*[<(]"),
        ),
        Check(
            rule_id="UNITY-MEM-003",
            description="String concatenation every frame allocates",
            remediation="Use a cached StringBuilder or update text only on change",
            confidence=78,
            detect=in_brace_block(FRAME_LOOP, r"\"\s*\+|\+\s*\""),
        ),
    ),
)

PLATFORM_COMPATIBILITY = Lens(
    name="platform-compatibility",
    description="APIs unavailable on some build targets",
    checks=(
        Check(
            rule_id="UNITY-PLAT-001",
            description="System.Threading.Thread is unsupported on WebGL",
            remediation="Use coroutines, async/await on the main thread, or the Job System",
            confidence=85,
            detect=line_pattern(r"\bnew\s+(System\.Threading\.)?Thread\s*\("),
        ),
        Check(
            rule_id="UNITY-PLAT-002",
            description="Direct file IO is unavailable on WebGL and restricted on consoles",
            remediation="Guard with platform defines and use Application.persistentDataPath",
            confidence=80,
            detect=outside_guard(
                r"\bFile\.(ReadAll\w*|WriteAll\w*|Open\w*|Exists|Delete|Copy)\s*\(",
                guard=r"(UNITY_STANDALONE|UNITY_EDITOR)",
                path_exempt=r"(^|/)Editor/",
            ),
        ),
        Check(
            rule_id="UNITY-PLAT-003",
            description="Runtime platform branching instead of conditional compilation",
            remediation="Use #if UNITY_<PLATFORM> defines",
            confidence=60,
            detect=line_pattern(r"\bApplication\.platform\s*[=!]="),
        ),
    ),
)

EDITOR_RUNTIME_SEPARATION = Lens(
    name="editor-runtime-separation",
    description="Editor-only APIs leaking into player builds",
    checks=(
        Check(
            rule_id="UNITY-EDIT-001",
            description="UnityEditor namespace used in runtime code breaks player builds",
            remediation="Move the code under an Editor/ folder or wrap it in #if UNITY_EDITOR",
            confidence=95,
            detect=outside_guard(
                r"^\s*using\s+UnityEditor\b", guard="UNITY_EDITOR", path_exempt=r"(^|/)Editor/"
            ),
        ),
        Check(
            rule_id="UNITY-EDIT-002",
            description="Editor-only API called from runtime code",
            remediation="Wrap the call in #if UNITY_EDITOR",
            confidence=90,
            detect=outside_guard(
                r"\b(AssetDatabase|EditorUtility|EditorApplication|PrefabUtility|Selection)\.\w+",
                guard="UNITY_EDITOR",
                path_exempt=r"(^|/)Editor/",
            ),
        ),
    ),
)

UNITY = Domain(
    name="unity",
    suffixes=(".cs",),
    lenses=(
        LIFECYCLE,
        SERIALIZATION,
        PERFORMANCE,
        MEMORY,
        PLATFORM_COMPATIBILITY,
        EDITOR_RUNTIME_SEPARATION,
    ),
)
