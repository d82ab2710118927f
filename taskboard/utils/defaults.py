"""Default values shared by the backend models and the board client."""

DEFAULT_COLUMN_COLOR = '#8b949e'
DEFAULT_WALLPAPER = '/wallpapers/wallpaper-0.webp'
MAX_CUSTOM_WALLPAPERS = 4

NEW_BOARD_TITLE = 'New Board'
NEW_COLUMN_TITLE = 'New Column'
NEW_BOARD_COLUMNS = [{'title': 'To Do', 'color': '#42A5F5'}]

WELCOME_BOARD = {
    'title': 'My First Board',
    'columns': [
        {'title': 'To Do', 'color': '#42A5F5', 'cards': [{'title': 'Welcome to your new board!'}]},
        {'title': 'In Progress', 'color': '#FFA726'},
        {'title': 'Done', 'color': '#66BB6A'},
    ],
}

GUEST_WELCOME_BOARD = {
    'title': 'Welcome, Guest!',
    'columns': [
        {'title': 'To Do', 'color': '#fb7032', 'cards': [
            {'title': 'Hi! Your data is saved on this device'},
            {'title': 'Clearing local storage will erase this board'},
        ]},
        {'title': 'In Progress', 'color': '#fca311', 'cards': [
            {'title': 'Every feature works in guest mode'},
        ]},
        {'title': 'Done', 'color': '#2ea44f', 'cards': [
            {'title': 'Sign in to keep your boards in the cloud'},
        ]},
    ],
}
