"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Layout: conversation (with the filter bar) on the left, technical data,
voice transcript and log stacked on the right, status and input below.
"""

APP_CSS = """
/* ============================================
   Main Screen Layout
   ============================================ */
Screen {
    layout: grid;
    grid-size: 2 2;
    grid-columns: 3fr 2fr;
    grid-rows: 1fr auto;
    background: $background;
}

#main-panel {
    height: 100%;
}

#right-panel {
    height: 100%;
    background: transparent;
}

/* ============================================
   Filter Bar
   ============================================ */
FilterBar {
    height: 3;
    background: $surface;
    padding: 0 1;
}

.filter-btn {
    min-width: 10;
    height: 3;
    margin: 0 1 0 0;
    border: tall $surface;
    background: $surface;
    color: $text-muted;

    &.-active {
        background: $panel;
        color: $foreground;
        border: tall $primary 60%;
        text-style: bold;
    }
}

/* ============================================
   Chat History Panel
   ============================================ */
#chat-history {
    height: 1fr;
    background: $surface;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }
}

.chat-message {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
    padding: 0 1;
}

.user-message {
    border-left: tall $primary;
    background: $primary 8%;

    & .message-header {
        color: $primary;
        text-style: bold;
    }
}

.bot-message {
    border-left: tall $border;

    & .message-header {
        color: $accent;
        text-style: bold;
    }
}

.message-header {
    height: auto;
}

.message-content {
    height: auto;
    color: $foreground;
}

.message-attachment {
    height: auto;
    color: $text-muted;
    text-style: italic;
}

.message-thinking {
    height: auto;
    color: $warning;
    text-style: italic;
}

.report-card {
    height: auto;
    margin: 0 0 1 0;
}

/* ============================================
   Visual Panel - Dimensional Data
   ============================================ */
#visual-panel {
    height: 2fr;
    background: $surface;
    border: round $secondary 60%;
    border-title-color: $secondary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
}

#visual-empty {
    height: 1fr;
    content-align: center middle;
    text-align: center;
    color: $text-muted;
}

#visual-table {
    height: auto;
    max-height: 100%;
}

#visual-note {
    height: auto;
    margin-top: 1;
}

/* ============================================
   Voice Transcript
   ============================================ */
#voice-panel {
    height: 1fr;
    min-height: 5;
    background: $surface;
    border: round $success 60%;
    border-title-color: $success;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-y: auto;
}

/* ============================================
   Debug/Log Panel
   ============================================ */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 14;
    background: $surface;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;
}

/* ============================================
   Bottom Bar - Status, Attachments, Input
   ============================================ */
#bottom-bar {
    column-span: 2;
    height: auto;
    padding: 0 1;
    background: $panel;
    border-top: solid $border;
}

#status {
    height: 1;
    padding: 0 1;
    margin: 1 0;
    background: $surface;
}

AttachmentBar {
    height: 3;
    margin-bottom: 1;
}

.attachment-chip {
    height: 3;
    margin: 0 1 0 0;
    background: $primary 15%;
    border: tall $primary 40%;
    color: $foreground;

    &:hover {
        background: $error 20%;
        border: tall $error;
    }
}

ChatInputBar {
    height: 5;
    margin-bottom: 1;
    border: round $primary 60%;
    background: $surface;

    &:focus-within {
        border: round $primary;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;

    &:focus {
        background: transparent;
    }
}

#attach-btn, #send-btn {
    width: 11;
    height: 100%;
    margin: 0 0 0 1;
}

/* ============================================
   Maximized Chat
   ============================================ */
#main-panel.-maximized {
    column-span: 2;
}

/* ============================================
   Header, Footer, Toasts
   ============================================ */
Header {
    background: $panel;
    color: $foreground;
    dock: top;
    height: 1;
}

HeaderTitle {
    color: $primary;
    text-style: bold;
}

Footer {
    background: $panel;
}

Toast {
    background: $surface;
    border: tall $border;
    padding: 0 1;

    &.-information {
        border: tall $primary;
    }

    &.-warning {
        border: tall $warning;
    }

    &.-error {
        border: tall $error;
    }
}

DataTable > .datatable--header {
    background: $panel;
    color: $primary;
    text-style: bold;
}
"""
