# Client -> server
CREATE_ROOM = "createRoom"
JOIN_ROOM = "joinRoom"
LEAVE_ROOM = "leaveRoom"
START_GAME = "startGame"
SUBMIT_PROMPT = "submitPrompt"
DRAWING_DATA = "drawingData"
SUBMIT_GUESS = "submitGuess"

# Server -> room
ROOM_UPDATE = "roomUpdate"
GAME_STARTED = "gameStarted"
PHASE_CHANGE = "phaseChange"
REVEAL_DATA = "revealData"
TIMER_START = "timerStart"
TIMER_TICK = "timerTick"
PLAYER_SUBMITTED = "playerSubmitted"
GAME_ENDED = "gameEnded"

# Server -> one player
DRAW_FOR = "drawFor"
GUESS_FOR = "guessFor"
