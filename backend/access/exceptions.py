class PolicyPreconditionError(RuntimeError):
    """
    Политика вызвана некорректно: состояние аутентификации ещё не
    определено или для действия над рецептом не передан сам рецепт.

    Это ошибка вызывающего кода, а не отказ в доступе, поэтому она
    выбрасывается, а не возвращается как ``Deny``.
    """
